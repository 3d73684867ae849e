"""Admin-only user management: paginated list, lookup, create, edit, role change, delete."""

import math
from typing import Annotated

from fastapi import APIRouter, Query, status

from panelauth.api.deps import AdminDep, SettingsDep, StoreDep
from panelauth.schemas.auth import UserEnvelope, UserOut
from panelauth.schemas.users import (
    AdminUpdateUserRequest,
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserResponse,
    Pagination,
    RoleUpdateRequest,
    UsersPage,
)
from panelauth.services import accounts

router = APIRouter()

MAX_PAGE_SIZE = 100
# (page - 1) * limit must fit an integer bind parameter.
MAX_PAGE = 1_000_000


@router.get("", response_model=UsersPage)
def list_users(
    _admin: AdminDep,
    store: StoreDep,
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 10,
) -> UsersPage:
    """List users newest first, one page at a time."""
    users, total = store.list_page(page, limit)
    total_pages = math.ceil(total / limit)
    return UsersPage(
        users=[UserOut.model_validate(u) for u in users],
        pagination=Pagination(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(user_id: str, _admin: AdminDep, store: StoreDep) -> UserEnvelope:
    return UserEnvelope(user=UserOut.model_validate(accounts.get_user(store, user_id)))


@router.post("", response_model=CreateUserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    _admin: AdminDep,
    store: StoreDep,
    settings: SettingsDep,
) -> CreateUserResponse:
    """
    Create an account with any role. When no password is given one is generated
    and returned once in generatedPassword.
    """
    user, generated = accounts.create_user_as_admin(
        store, settings, body.name, body.email, body.password, body.role
    )
    return CreateUserResponse(user=UserOut.model_validate(user), generated_password=generated)


@router.put(
    "/{user_id}",
    response_model=UserEnvelope,
    responses={404: {"description": "User not found"}, 409: {"description": "Email already registered"}},
)
def update_user(
    user_id: str,
    body: AdminUpdateUserRequest,
    _admin: AdminDep,
    store: StoreDep,
) -> UserEnvelope:
    """Edit name, email and/or profileImage of any account. Role is changed via /{user_id}/role."""
    changes = body.model_dump(include=body.model_fields_set)
    user = accounts.update_user_as_admin(store, user_id, changes)
    return UserEnvelope(user=UserOut.model_validate(user))


@router.patch("/{user_id}/role", response_model=UserEnvelope)
def update_role(
    user_id: str,
    body: RoleUpdateRequest,
    admin: AdminDep,
    store: StoreDep,
) -> UserEnvelope:
    user = accounts.set_role(store, admin.id, user_id, body.role)
    return UserEnvelope(user=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=DeleteUserResponse)
def delete_user(user_id: str, admin: AdminDep, store: StoreDep) -> DeleteUserResponse:
    accounts.delete_user(store, admin.id, user_id)
    return DeleteUserResponse(id=user_id)
