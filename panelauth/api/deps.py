"""Shared dependencies: settings, credential store and the session verifier."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from panelauth.core.config import Settings
from panelauth.core.database import get_db
from panelauth.core.errors import (
    ExpiredTokenError,
    ForbiddenError,
    InvalidTokenError,
    UnauthorizedError,
)
from panelauth.core.security import decode_access_token
from panelauth.repositories.users import UserStore
from panelauth.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Dependency: the Settings instance the app was built with."""
    return request.app.state.settings


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StoreDep = Annotated[UserStore, Depends(get_user_store)]


def extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> str | None:
    """Session cookie first, then an Authorization: Bearer header."""
    token = request.cookies.get(settings.COOKIE_NAME)
    if token:
        return token
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return None


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
    store: StoreDep,
    settings: SettingsDep,
) -> CurrentUser:
    """
    Dependency: resolve the acting user or raise 401.

    The user is loaded from the store on every request, so a token for a
    deleted account stops working immediately even though it is not expired.
    """
    token = extract_token(request, credentials, settings)
    if token is None:
        raise UnauthorizedError()
    try:
        payload = decode_access_token(settings, token)
    except ExpiredTokenError:
        logger.info("Rejected expired session token")
        raise UnauthorizedError()
    except InvalidTokenError:
        logger.info("Rejected invalid session token")
        raise UnauthorizedError()
    user = store.find_by_id(payload["sub"])
    if user is None:
        logger.info("Session token refers to a missing user")
        raise UnauthorizedError()
    return CurrentUser.model_validate(user)


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def require_admin(current_user: CurrentUserDep) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if not current_user.is_admin:
        raise ForbiddenError()
    return current_user


AdminDep = Annotated[CurrentUser, Depends(require_admin)]
