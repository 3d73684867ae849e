"""Credential store: persistence of User records keyed by id and by email."""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from panelauth.core.errors import DuplicateKeyError, StorageError
from panelauth.models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "email", "profile_image", "password_hash", "role"})

# Name of the unique index on users.email (see models/user.py and the migration).
EMAIL_UNIQUE_INDEX = "ix_users_email"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_duplicate_email(exc: IntegrityError) -> bool:
    """True when the violated constraint is the unique email index, not NOT NULL or a check."""
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == EMAIL_UNIQUE_INDEX
    message = str(exc.orig).lower()
    return "users.email" in message and "unique" in message


class UserStore:
    """
    Read/write access to users over one SQLAlchemy session.

    Every call goes to the database. Driver failures surface as StorageError;
    a violation of the unique email index surfaces as DuplicateKeyError.
    """

    def __init__(self, session: Session):
        self.session = session

    def _fail(self, op: str, exc: SQLAlchemyError) -> StorageError:
        self.session.rollback()
        logger.error("User store %s failed: %s", op, type(exc).__name__, exc_info=exc)
        return StorageError()

    def find_by_email(self, email: str) -> User | None:
        try:
            return self.session.scalars(
                select(User).where(User.email == normalize_email(email))
            ).first()
        except SQLAlchemyError as e:
            raise self._fail("find_by_email", e) from e

    def find_by_id(self, user_id: str) -> User | None:
        try:
            return self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise self._fail("find_by_id", e) from e

    def insert(self, user: User) -> User:
        email = user.email
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            if not is_duplicate_email(e):
                raise self._fail("insert", e) from e
            self.session.rollback()
            raise DuplicateKeyError(email) from e
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e
        return user

    def update(self, user_id: str, **fields: Any) -> User | None:
        """Set only the given fields; returns None when the user does not exist."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        user = self.find_by_id(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        try:
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            if "email" not in fields or not is_duplicate_email(e):
                raise self._fail("update", e) from e
            self.session.rollback()
            raise DuplicateKeyError(normalize_email(fields["email"])) from e
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e
        return user

    def delete(self, user_id: str) -> bool:
        user = self.find_by_id(user_id)
        if user is None:
            return False
        try:
            self.session.delete(user)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e
        return True

    def list_page(self, page: int, limit: int) -> tuple[list[User], int]:
        """Return one page of users (newest first) and the total count."""
        try:
            total = self.session.scalar(select(func.count()).select_from(User)) or 0
            users = list(
                self.session.scalars(
                    select(User)
                    .order_by(User.created_at.desc(), User.id)
                    .offset((page - 1) * limit)
                    .limit(limit)
                )
            )
        except SQLAlchemyError as e:
            raise self._fail("list_page", e) from e
        return users, total

