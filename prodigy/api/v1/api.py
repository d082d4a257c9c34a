from fastapi import APIRouter
from prodigy.api.v1.endpoints import (
    auth, health, users, friend_requests, groups, join_requests, tasks, messages
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])

# Relationship and collaboration endpoints
api_router.include_router(friend_requests.router, prefix="/friend-requests", tags=["friend-requests"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(join_requests.router, prefix="/join-requests", tags=["join-requests"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(messages.router, prefix="/messages", tags=["messages"])
