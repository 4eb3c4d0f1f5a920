"""Domain errors raised by services and dependencies.

Each error carries the HTTP status it is rendered with by the handler
registered in ``clubops.main``.
"""

from typing import Optional


class ClubOpsError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 400

    def __init__(self, message: str, headers: Optional[dict] = None):
        self.message = message
        self.headers = headers
        super().__init__(message)


class ValidationError(ClubOpsError):
    """Malformed or missing input."""

    status_code = 400


class AuthError(ClubOpsError):
    """Missing, invalid or expired credentials."""

    status_code = 401

    def __init__(self, message: str = "Access token required"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ClubOpsError):
    """Authenticated, but not allowed to touch this club."""

    status_code = 403


class NotFoundError(ClubOpsError):
    """Referenced entity is absent or belongs to another club."""

    status_code = 404


class ConflictError(ClubOpsError):
    """Duplicate unique field, occupied room or lost update race."""

    status_code = 409
