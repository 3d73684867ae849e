"""Error taxonomy for the auth service.

Every error a caller can see is a subclass of PanelAuthError and carries the HTTP
status and the short, non-revealing message that goes into the response body.
Token and store errors are internal: the session verifier and the account
service translate them into one of the public kinds before they reach a handler.
"""

from fastapi import status


class PanelAuthError(Exception):
    """Base exception for all errors rendered to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Server error"
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(PanelAuthError):
    """Malformed input that passed schema parsing but fails a domain rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class InvalidCredentialsError(PanelAuthError):
    """Wrong email or password. The message never says which one."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"


class UnauthorizedError(PanelAuthError):
    """Missing, invalid or expired session, or the session's user is gone."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class IncorrectCurrentPasswordError(InvalidCredentialsError):
    """Change-password was called with the wrong current password."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Current password is incorrect"


class ForbiddenError(PanelAuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Admin access required"


class NotFoundError(PanelAuthError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "User not found"


class ConflictError(PanelAuthError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Email already registered"


class StorageError(PanelAuthError):
    """The credential store failed. Driver details stay in the logs."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error"


class TokenError(Exception):
    """Base for token verification failures."""


class InvalidTokenError(TokenError):
    """Bad signature, malformed token or missing claims."""


class ExpiredTokenError(TokenError):
    """Signature is valid but the token is past its expiry."""


class DuplicateKeyError(Exception):
    """The store's unique email index rejected an insert."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"duplicate email: {email}")
