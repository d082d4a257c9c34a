"""
Task ledger.

A task is owned by exactly one user. Tasks without a group are personal; tasks
with a group are team tasks visible to the group. Only the owner may mutate a task.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from prodigy.core.errors import Forbidden, NotFound, ValidationError
from prodigy.models.common import now_iso
from prodigy.models.task import Task, TaskPriority, TaskStatus
from prodigy.services import groups
from prodigy.services.identity import require_user

logger = logging.getLogger(__name__)

SCOPE_ALL = "all"
SCOPE_PERSONAL = "personal"
SCOPE_TEAM = "team"

_EDITABLE_FIELDS = ("title", "description", "group_id", "priority", "status", "due_date")


def _validated_title(title: Optional[str]) -> str:
    if not title or not title.strip():
        raise ValidationError("Task title is required")
    return title.strip()


def _validated_due_date(due_date: Optional[str]) -> Optional[str]:
    if not due_date:
        return None
    try:
        return datetime.fromisoformat(due_date).isoformat()
    except ValueError:
        raise ValidationError("Invalid due date")


def _require_membership(db: Session, group_id: str, user_id: str, message: str):
    group = groups.require_group(db, group_id)
    if not groups.is_member(db, group, user_id):
        raise Forbidden(message)
    return group


def require_task(db: Session, task_id: str) -> Task:
    task = db.get(Task, task_id)
    if not task:
        raise NotFound("Task not found")
    return task


def create(
    db: Session,
    created_by: str,
    title: str,
    description: Optional[str] = None,
    owner_id: Optional[str] = None,
    group_id: Optional[str] = None,
    priority: TaskPriority = TaskPriority.MEDIUM,
    status: TaskStatus = TaskStatus.PENDING,
    due_date: Optional[str] = None,
) -> Task:
    """
    Create a task owned by ``owner_id`` (defaults to the creator).

    A creator may assign a task to someone else only for a team task where both
    belong to the group; the assignee then owns the task.

    Raises:
        ValidationError: If the title is empty or the due date is malformed
        Forbidden: If the creator may not assign to ``owner_id`` or is not a group member
        NotFound: If the assignee or the group does not exist
    """
    title = _validated_title(title)
    owner_id = owner_id or created_by

    if group_id:
        group = _require_membership(db, group_id, created_by, "You must be a member of this group")
        if owner_id != created_by:
            require_user(db, owner_id)
            if not groups.is_member(db, group, owner_id):
                raise Forbidden("The assignee is not a member of this group")
    elif owner_id != created_by:
        raise Forbidden("Access denied. You can only create tasks for yourself.")

    task = Task(
        title=title,
        description=description,
        user_id=owner_id,
        group_id=group_id or None,
        priority=TaskPriority(priority),
        status=TaskStatus(status),
        due_date=_validated_due_date(due_date),
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Task %s created by %s for %s", task.id, created_by, owner_id)
    return task


def _require_owned(db: Session, task_id: str, by_user_id: str, action: str) -> Task:
    task = require_task(db, task_id)
    if task.user_id != by_user_id:
        raise Forbidden(f"Access denied. You can only {action} your own tasks.")
    return task


def update(db: Session, task_id: str, by_user_id: str, patch: Dict[str, Any]) -> Task:
    """
    Apply ``patch`` to a task owned by ``by_user_id``.

    Raises:
        NotFound: If the task does not exist
        Forbidden: If the caller is not the owner, or moves the task to a group
            they do not belong to
        ValidationError: If the title is emptied or the due date is malformed
    """
    task = _require_owned(db, task_id, by_user_id, "update")

    changes = {key: value for key, value in patch.items() if key in _EDITABLE_FIELDS}
    if "title" in changes:
        changes["title"] = _validated_title(changes["title"])
    if "due_date" in changes:
        changes["due_date"] = _validated_due_date(changes["due_date"])
    if changes.get("group_id"):
        _require_membership(db, changes["group_id"], by_user_id, "You must be a member of this group")
    if "status" in changes and changes["status"] is not None:
        changes["status"] = TaskStatus(changes["status"])
    if "priority" in changes and changes["priority"] is not None:
        changes["priority"] = TaskPriority(changes["priority"])

    if "group_id" in changes:
        changes["group_id"] = changes["group_id"] or None

    for key, value in changes.items():
        if value is None and key in ("status", "priority"):
            continue
        setattr(task, key, value)
    task.updated_at = now_iso()

    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Task %s updated by %s", task.id, by_user_id)
    return task


def complete(db: Session, task_id: str, by_user_id: str) -> Task:
    return update(db, task_id, by_user_id, {"status": TaskStatus.COMPLETED})


def delete(db: Session, task_id: str, by_user_id: str) -> None:
    task = _require_owned(db, task_id, by_user_id, "delete")
    db.delete(task)
    db.commit()
    logger.info("Task %s deleted by %s", task_id, by_user_id)


def get_visible(db: Session, task_id: str, by_user_id: str) -> Task:
    """A task readable by its owner or by members of its group."""
    task = require_task(db, task_id)
    if task.user_id == by_user_id:
        return task
    if task.group_id:
        group = groups.get_by_id(db, task.group_id)
        if group and groups.is_member(db, group, by_user_id):
            return task
    raise Forbidden("Access denied. You cannot view this task.")


def list_for_user(db: Session, user_id: str, scope: str = SCOPE_ALL, group_id: Optional[str] = None) -> List[Task]:
    """
    Tasks owned by ``user_id``.

    Args:
        scope: "all", "personal" (no group) or "team" (with a group)
        group_id: With scope "team", only tasks of this group
    """
    statement = select(Task).where(Task.user_id == user_id)
    if scope == SCOPE_PERSONAL:
        statement = statement.where(Task.group_id.is_(None))
    elif scope == SCOPE_TEAM:
        statement = statement.where(Task.group_id.is_not(None))
        if group_id:
            statement = statement.where(Task.group_id == group_id)
    elif scope != SCOPE_ALL:
        raise ValidationError(f"Unknown task scope: {scope}")
    return list(db.exec(statement.order_by(Task.created_at)).all())


def list_for_group(db: Session, group_id: str, by_user_id: str) -> List[Task]:
    """
    All tasks of a group.

    Raises:
        NotFound: If the group does not exist
        Forbidden: If the caller is neither the owner nor a member
    """
    _require_membership(
        db, group_id, by_user_id,
        "Access denied. You must be a member of this group to view tasks.",
    )
    statement = select(Task).where(Task.group_id == group_id).order_by(Task.created_at)
    return list(db.exec(statement).all())
