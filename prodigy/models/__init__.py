from .user import User, Friendship
from .friend_request import FriendRequest, FriendRequestStatus
from .group import Group, GroupMember
from .join_request import JoinRequest, JoinRequestStatus
from .task import Task, TaskStatus, TaskPriority
from .message import Message

__all__ = [
    "User", "Friendship",
    "FriendRequest", "FriendRequestStatus",
    "Group", "GroupMember",
    "JoinRequest", "JoinRequestStatus",
    "Task", "TaskStatus", "TaskPriority",
    "Message",
]
