"""
Task Model Module

This module defines the Task model. A task belongs to exactly one user (its
owner/assignee) and is either personal (no group) or a team task scoped to a group.
"""
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from prodigy.models.common import now_iso


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskBase(SQLModel):
    """
    Base Task model containing common fields.
    """
    title: str = Field(nullable=False)
    description: Optional[str] = None

    # Due date stored as ISO format string
    due_date: Optional[str] = None

    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    status: TaskStatus = Field(default=TaskStatus.PENDING)

    # Team tasks carry the group they belong to; personal tasks have none
    group_id: Optional[str] = Field(default=None, foreign_key="groups.id", index=True)

    # Audit timestamps
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


class Task(TaskBase, table=True):
    """
    Task table model.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Owner and assignee: the only identity allowed to mutate the task
    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    @property
    def is_personal(self) -> bool:
        return self.group_id is None
