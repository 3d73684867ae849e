"""SQLAlchemy ORM models."""

from panelauth.models.base import Base
from panelauth.models.user import Role, User

__all__ = ["Base", "Role", "User"]
