"""Auth endpoints: register, login, logout, me, profile, change-password, refresh-token.

Handlers are plain functions so FastAPI runs them in its thread pool and bcrypt
work never blocks the event loop.
"""

from fastapi import APIRouter, Response, status

from panelauth.api.deps import CurrentUserDep, SettingsDep, StoreDep
from panelauth.core.cookies import attach_session_cookie, clear_session_cookie
from panelauth.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    ChangePasswordResponse,
    LoginRequest,
    MessageResponse,
    RefreshResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserEnvelope,
    UserOut,
)
from panelauth.services import accounts

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid input"},
        409: {"description": "Email already registered"},
    },
)
def register(
    body: RegisterRequest,
    response: Response,
    store: StoreDep,
    settings: SettingsDep,
) -> AuthResponse:
    """Create an account with role 'user', start a session and return the user."""
    user = accounts.register_user(store, settings, body.name, body.email, body.password)
    token = accounts.issue_session_token(settings, user.id, user.email)
    attach_session_cookie(response, token, settings)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials"}},
)
def login(
    body: LoginRequest,
    response: Response,
    store: StoreDep,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Authenticate with email and password; returns the user and a JWT.
    The token is also set as an HttpOnly cookie. Non-browser clients can send
    it back as: Authorization: Bearer <token>
    """
    user = accounts.authenticate(store, settings, body.email, body.password)
    token = accounts.issue_session_token(settings, user.id, user.email)
    attach_session_cookie(response, token, settings)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, settings: SettingsDep) -> MessageResponse:
    """Clear the session cookie. Succeeds with or without a valid session."""
    clear_session_cookie(response, settings)
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    response_model=UserEnvelope,
    responses={401: {"description": "Not authenticated"}},
)
def me(current_user: CurrentUserDep, store: StoreDep) -> UserEnvelope:
    """Return the current user, read fresh from the store."""
    user = accounts.get_user(store, current_user.id)
    return UserEnvelope(user=UserOut.model_validate(user))


@router.api_route(
    "/profile",
    methods=["PUT", "PATCH"],
    response_model=UserEnvelope,
    responses={404: {"description": "User not found"}},
)
def update_profile(
    body: UpdateProfileRequest,
    current_user: CurrentUserDep,
    store: StoreDep,
) -> UserEnvelope:
    """Update name and/or profileImage; fields missing from the body are unchanged."""
    changes = body.model_dump(include=body.model_fields_set)
    user = accounts.update_profile(store, current_user.id, changes)
    return UserEnvelope(user=UserOut.model_validate(user))


@router.put(
    "/change-password",
    response_model=ChangePasswordResponse,
    responses={400: {"description": "Current password is incorrect"}},
)
def change_password(
    body: ChangePasswordRequest,
    response: Response,
    current_user: CurrentUserDep,
    store: StoreDep,
    settings: SettingsDep,
) -> ChangePasswordResponse:
    """
    Change the password and end the current session.

    Issued tokens cannot be revoked server-side, so the cookie is cleared and the
    client is told to log in again with the new password.
    """
    accounts.change_password(
        store,
        settings,
        current_user.id,
        body.current_password,
        body.new_password,
    )
    clear_session_cookie(response, settings)
    return ChangePasswordResponse()


@router.post(
    "/refresh-token",
    response_model=RefreshResponse,
    responses={401: {"description": "Not authenticated"}},
)
def refresh_token(
    response: Response,
    current_user: CurrentUserDep,
    settings: SettingsDep,
) -> RefreshResponse:
    """Issue a fresh token (new expiry) for a still-valid session."""
    token = accounts.issue_session_token(settings, current_user.id, current_user.email)
    attach_session_cookie(response, token, settings)
    return RefreshResponse(token=token)
