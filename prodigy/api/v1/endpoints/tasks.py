"""
Task Endpoints Module

This module provides CRUD endpoints for tasks. Only a task's owner may modify it;
team tasks are readable by the members of their group.
"""
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prodigy.api import deps
from prodigy.db.session import get_db
from prodigy.models.user import User
from prodigy.schemas.base import StatusMessage
from prodigy.schemas.task import TaskCreate, TaskRead, TaskUpdate, TaskWithOwner
from prodigy.schemas.user import UserPublic
from prodigy.services import identity, tasks

router = APIRouter()


@router.post("", response_model=TaskRead)
def create_task(
    task_in: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Create a new task.

    ``userId`` may name another member of ``groupId`` to assign a team task;
    otherwise the task belongs to the current user.

    Raises:
        ValidationError (400): If the title is empty
        Forbidden (403): If assigning to someone else outside a shared group
    """
    return tasks.create(
        db,
        created_by=current_user.id,
        title=task_in.title,
        description=task_in.description,
        owner_id=task_in.user_id,
        group_id=task_in.group_id,
        priority=task_in.priority,
        status=task_in.status,
        due_date=task_in.due_date,
    )


@router.get("/user/{user_id}", response_model=List[TaskRead])
def list_user_tasks(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    deps.require_self(user_id, current_user)
    return tasks.list_for_user(db, user_id, tasks.SCOPE_ALL)


@router.get("/user/{user_id}/personal", response_model=List[TaskRead])
def list_personal_tasks(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    deps.require_self(user_id, current_user)
    return tasks.list_for_user(db, user_id, tasks.SCOPE_PERSONAL)


@router.get("/user/{user_id}/team", response_model=List[TaskRead])
def list_team_tasks(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    deps.require_self(user_id, current_user)
    return tasks.list_for_user(db, user_id, tasks.SCOPE_TEAM)


@router.get("/user/{user_id}/team/{group_id}", response_model=List[TaskRead])
def list_team_tasks_for_group(
    user_id: str,
    group_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    deps.require_self(user_id, current_user)
    return tasks.list_for_user(db, user_id, tasks.SCOPE_TEAM, group_id=group_id)


@router.get("/group/{group_id}", response_model=List[TaskWithOwner])
def list_group_tasks(
    group_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    All tasks of a group, each with its owner's public profile.

    Raises:
        NotFound (404): If the group doesn't exist
        Forbidden (403): If the current user is not the owner or a member
    """
    result = []
    for task in tasks.list_for_group(db, group_id, current_user.id):
        owner = identity.get_by_id(db, task.user_id)
        result.append(TaskWithOwner(
            **task.model_dump(),
            owner=UserPublic.model_validate(owner) if owner else None,
        ))
    return result


@router.get("/{task_id}", response_model=TaskRead)
def read_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return tasks.get_visible(db, task_id, current_user.id)


@router.patch("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: str,
    task_in: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Update an existing task. Only the owner may update it.
    """
    return tasks.update(db, task_id, current_user.id, task_in.model_dump(exclude_unset=True))


@router.patch("/{task_id}/complete", response_model=TaskRead)
def complete_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return tasks.complete(db, task_id, current_user.id)


@router.delete("/{task_id}", response_model=StatusMessage)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Delete a task. Only the owner may delete it.
    """
    tasks.delete(db, task_id, current_user.id)
    return StatusMessage(message="Task deleted successfully")
