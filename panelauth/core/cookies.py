"""Session cookie: set on login/register, cleared on logout/password change."""

from typing import Any

from fastapi import Response

from panelauth.core.config import Settings


def cookie_attributes(settings: Settings) -> dict[str, Any]:
    """
    Attribute set shared by attach and clear.

    Browsers only drop a cookie when the clearing Set-Cookie matches the
    original path, domain, secure and samesite, so both call sites use this.
    """
    if settings.is_production:
        samesite = "none" if settings.COOKIE_CROSS_SITE else "lax"
        secure = True
    else:
        samesite = "lax"
        secure = False
    return {
        "httponly": True,
        "secure": secure,
        "samesite": samesite,
        "path": "/",
        "domain": settings.COOKIE_DOMAIN,
    }


def attach_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Set the session token cookie; its lifetime mirrors the token's."""
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.token_lifetime_seconds,
        **cookie_attributes(settings),
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Expire the session cookie using the same attributes it was set with."""
    response.delete_cookie(key=settings.COOKIE_NAME, **cookie_attributes(settings))
