"""Request/response schemas for admin user management."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from panelauth.models.user import Role
from panelauth.schemas.auth import DisplayName, NewPassword, UserOut, check_image_url


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_items: int = Field(alias="totalItems")
    items_per_page: int = Field(alias="itemsPerPage")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")


class UsersPage(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserOut]
    pagination: Pagination


class CreateUserRequest(BaseModel):
    """Admin-created account. A password is generated when none is given."""

    name: DisplayName
    email: EmailStr
    password: NewPassword | None = None
    role: Role = Role.USER


class CreateUserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: UserOut
    generated_password: str | None = Field(default=None, alias="generatedPassword")
    message: str = "User added successfully!"


class AdminUpdateUserRequest(BaseModel):
    """Admin edit of another account. Fields missing from the body are unchanged; role has its own endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    name: DisplayName | None = None
    email: EmailStr | None = None
    profile_image: str | None = Field(default=None, alias="profileImage")

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v: str | None) -> str | None:
        return check_image_url(v)


class RoleUpdateRequest(BaseModel):
    role: Role


class DeleteUserResponse(BaseModel):
    ok: bool = True
    id: str
    message: str = "User deleted successfully!"
