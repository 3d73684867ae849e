"""Account operations: registration, login, profile and password changes, admin actions.

Functions here take a UserStore and Settings and raise PanelAuthError subclasses.
They never touch the HTTP response; routes handle cookies.
"""

import logging
from typing import Any

from panelauth.core.config import Settings
from panelauth.core.errors import (
    ConflictError,
    DuplicateKeyError,
    IncorrectCurrentPasswordError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from panelauth.core.security import (
    burn_password_check,
    create_access_token,
    generate_secure_password,
    hash_password,
    verify_password,
)
from panelauth.models.user import Role, User
from panelauth.repositories.users import UserStore, normalize_email

logger = logging.getLogger(__name__)


def issue_session_token(settings: Settings, user_id: str, email: str) -> str:
    return create_access_token(settings, sub=user_id, email=email)


def _insert_new_user(
    store: UserStore,
    settings: Settings,
    name: str,
    email: str,
    password: str,
    role: Role,
) -> User:
    email = normalize_email(email)
    # Fast path only; the unique index decides when two requests race.
    if store.find_by_email(email) is not None:
        raise ConflictError()
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        role=role.value,
    )
    try:
        return store.insert(user)
    except DuplicateKeyError as e:
        raise ConflictError() from e


def register_user(
    store: UserStore,
    settings: Settings,
    name: str,
    email: str,
    password: str,
) -> User:
    """Create a self-registered account. The role is always 'user'."""
    user = _insert_new_user(store, settings, name, email, password, Role.USER)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(store: UserStore, settings: Settings, email: str, password: str) -> User:
    """
    Return the user for a valid email/password pair.

    Unknown email and wrong password raise the same InvalidCredentialsError and
    cost the same bcrypt work.
    """
    user = store.find_by_email(email)
    if user is None:
        burn_password_check(password, rounds=settings.BCRYPT_ROUNDS)
        logger.warning("Login failed")
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed")
        raise InvalidCredentialsError()
    logger.info("Login succeeded", extra={"user_id": user.id})
    return user


def get_user(store: UserStore, user_id: str) -> User:
    user = store.find_by_id(user_id)
    if user is None:
        raise NotFoundError()
    return user


def update_profile(store: UserStore, user_id: str, changes: dict[str, Any]) -> User:
    """Apply name/profile_image changes; keys absent from changes are left alone."""
    fields = {k: v for k, v in changes.items() if k in ("name", "profile_image")}
    if "name" in fields and fields["name"] is None:
        raise ValidationError("Name cannot be empty")
    if not fields:
        return get_user(store, user_id)
    user = store.update(user_id, **fields)
    if user is None:
        raise NotFoundError()
    logger.info("Profile updated", extra={"user_id": user_id, "fields": sorted(fields)})
    return user


def change_password(
    store: UserStore,
    settings: Settings,
    user_id: str,
    current_password: str,
    new_password: str,
) -> User:
    """
    Replace the password hash after checking the current password.

    Tokens already issued stay valid until they expire; the caller clears the
    session cookie so the client has to log in again.
    """
    user = get_user(store, user_id)
    if not verify_password(current_password, user.password_hash):
        logger.warning("Password change rejected", extra={"user_id": user_id})
        raise IncorrectCurrentPasswordError()
    updated = store.update(
        user_id,
        password_hash=hash_password(new_password, rounds=settings.BCRYPT_ROUNDS),
    )
    if updated is None:
        raise NotFoundError()
    logger.info("Password changed", extra={"user_id": user_id})
    return updated


def create_user_as_admin(
    store: UserStore,
    settings: Settings,
    name: str,
    email: str,
    password: str | None,
    role: Role,
) -> tuple[User, str | None]:
    """Create an account on behalf of an admin; returns the generated password if one was made."""
    generated = None
    if password is None:
        generated = generate_secure_password()
        password = generated
    user = _insert_new_user(store, settings, name, email, password, role)
    logger.info("User created by admin", extra={"user_id": user.id, "role": user.role})
    return user, generated


def update_user_as_admin(store: UserStore, user_id: str, changes: dict[str, Any]) -> User:
    """
    Apply an admin's edit of name, email and/or profile_image to another account.

    A new email must not belong to a different user; the unique index settles races.
    """
    fields = {k: v for k, v in changes.items() if k in ("name", "email", "profile_image")}
    for key in ("name", "email"):
        if key in fields and fields[key] is None:
            raise ValidationError(f"{key.capitalize()} cannot be empty")
    user = get_user(store, user_id)
    if not fields:
        return user
    if "email" in fields:
        fields["email"] = normalize_email(fields["email"])
        owner = store.find_by_email(fields["email"])
        if owner is not None and owner.id != user_id:
            raise ConflictError()
    try:
        user = store.update(user_id, **fields)
    except DuplicateKeyError as e:
        raise ConflictError() from e
    if user is None:
        raise NotFoundError()
    logger.info("User updated by admin", extra={"user_id": user_id, "fields": sorted(fields)})
    return user


def set_role(store: UserStore, acting_user_id: str, target_user_id: str, role: Role) -> User:
    """Change a user's role. The only path through which role is modified."""
    if acting_user_id == target_user_id and role != Role.ADMIN:
        raise ValidationError("Admins cannot remove their own admin role")
    user = store.update(target_user_id, role=role.value)
    if user is None:
        raise NotFoundError()
    logger.info(
        "Role changed",
        extra={"user_id": target_user_id, "role": role.value, "by": acting_user_id},
    )
    return user


def delete_user(store: UserStore, acting_user_id: str, target_user_id: str) -> None:
    if acting_user_id == target_user_id:
        raise ValidationError("Admins cannot delete their own account")
    if not store.delete(target_user_id):
        raise NotFoundError()
    logger.info("User deleted", extra={"user_id": target_user_id, "by": acting_user_id})
