from typing import Optional

from prodigy.models.task import TaskPriority, TaskStatus
from prodigy.schemas.base import CamelModel
from prodigy.schemas.user import UserPublic


class TaskCreate(CamelModel):
    title: str
    description: Optional[str] = None
    # Assignee; defaults to the caller
    user_id: Optional[str] = None
    group_id: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[str] = None


class TaskUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    group_id: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[str] = None


class TaskRead(CamelModel):
    id: str
    user_id: str
    group_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[str] = None
    created_at: str
    updated_at: str


class TaskWithOwner(TaskRead):
    owner: Optional[UserPublic] = None
