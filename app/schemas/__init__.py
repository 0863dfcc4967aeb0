"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AddUserRequest,
    AuthRequest,
    ChangePasswordRequest,
    LoginResponse,
    MessageResponse,
    UserListItem,
    UsersListResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AddUserRequest",
    "AuthRequest",
    "ChangePasswordRequest",
    "HealthResponse",
    "LoginResponse",
    "MessageResponse",
    "UserListItem",
    "UsersListResponse",
]
