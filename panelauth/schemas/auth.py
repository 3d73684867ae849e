"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from panelauth.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)

DisplayName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN),
]
NewPassword = Annotated[
    str,
    Field(min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN),
]


def check_image_url(v: str | None) -> str | None:
    if v is None:
        return None
    s = v.strip()
    if not s:
        return None
    if not (s.lower().startswith("http://") or s.lower().startswith("https://")):
        raise ValueError("profileImage must be an http or https URL")
    if len(s) > 2048:
        raise ValueError("profileImage must be at most 2048 characters")
    return s


class RegisterRequest(BaseModel):
    """Registration payload. Any role sent by the client is ignored."""

    name: DisplayName = Field(..., description="Display name (2-60 characters)")
    email: EmailStr = Field(..., description="Login email; stored lowercased")
    password: NewPassword = Field(..., description="Password (8-128 characters)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ann",
                "email": "ann@example.com",
                "password": "secret123",
            },
        },
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class UpdateProfileRequest(BaseModel):
    """Partial profile update; only fields present in the body are changed."""

    model_config = ConfigDict(populate_by_name=True)

    name: DisplayName | None = None
    profile_image: str | None = Field(default=None, alias="profileImage")

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v: str | None) -> str | None:
        return check_image_url(v)


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(
        ..., min_length=1, max_length=PASSWORD_MAX_LEN, alias="currentPassword"
    )
    new_password: NewPassword = Field(..., alias="newPassword")


class UserOut(BaseModel):
    """Safe user projection returned by every endpoint. Never carries the hash."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    email: str
    role: str
    profile_image: str | None = Field(default=None, alias="profileImage")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class CurrentUser(BaseModel):
    """Authenticated user attached to the request by the session verifier."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    profile_image: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class AuthResponse(BaseModel):
    """Returned by register and login; the token is also set as a cookie."""

    user: UserOut
    token: str


class UserEnvelope(BaseModel):
    user: UserOut


class MessageResponse(BaseModel):
    message: str


class ChangePasswordResponse(BaseModel):
    message: str = "Password updated successfully. Please login again."
    logout: bool = True


class RefreshResponse(BaseModel):
    message: str = "Token refreshed successfully"
    token: str
