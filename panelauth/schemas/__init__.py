"""Pydantic request/response schemas."""

from panelauth.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    ChangePasswordResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RefreshResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserEnvelope,
    UserOut,
)
from panelauth.schemas.health import HealthResponse
from panelauth.schemas.users import (
    AdminUpdateUserRequest,
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserResponse,
    Pagination,
    RoleUpdateRequest,
    UsersPage,
)

__all__ = [
    "AdminUpdateUserRequest",
    "AuthResponse",
    "ChangePasswordRequest",
    "ChangePasswordResponse",
    "CreateUserRequest",
    "CreateUserResponse",
    "CurrentUser",
    "DeleteUserResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "Pagination",
    "RefreshResponse",
    "RegisterRequest",
    "RoleUpdateRequest",
    "UpdateProfileRequest",
    "UserEnvelope",
    "UserOut",
    "UsersPage",
]
