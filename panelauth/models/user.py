"""ORM model for admin panel accounts (credentials, profile and role)."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime, String, func
from sqlalchemy.orm import validates

from panelauth.models.base import Base


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


def _new_user_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    Account used for cookie/JWT sessions and role-based access control.

    email is stored lowercased; the unique index on it is what makes
    registration race-safe. password_hash never leaves the store layer.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    id = Column(String(32), primary_key=True, default=_new_user_id)
    name = Column(String(60), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=Role.USER.value)
    profile_image = Column(String(2048), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    @validates("email")
    def _normalize_email(self, _key: str, value: str) -> str:
        return value.strip().lower()

    @validates("role")
    def _check_role(self, _key: str, value: str | Role) -> str:
        return Role(value).value

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"
