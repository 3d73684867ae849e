"""Persistence access for ORM models."""

from panelauth.repositories.users import UserStore, normalize_email

__all__ = ["UserStore", "normalize_email"]
