"""Authentication and club-scoping dependencies.

Every club-scoped route depends on ``ClubScope``: a valid bearer token plus
a ``Club-ID`` header naming a club the caller is a member of.
"""

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Request

from clubops.core.config import settings
from clubops.core.exceptions import AuthError, ForbiddenError, ValidationError
from clubops.core.security import decode_access_token
from clubops.db.session import DbSession
from clubops.models.club import Club, ClubRole
from clubops.models.user import User


def get_bearer_token(request: Request) -> Optional[str]:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1] or None
    return None


def get_current_user(request: Request, db: DbSession) -> User:
    """Resolve the active user behind the bearer token."""
    token = get_bearer_token(request)
    if not token:
        raise AuthError("Access token required")

    payload = decode_access_token(token)
    if payload is None or payload.get("sub") is None:
        raise AuthError("Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthError("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise AuthError("Invalid or expired token")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


@dataclass
class ClubContext:
    """The caller and the club a request is scoped to."""

    user: User
    club: Club
    role: ClubRole

    @property
    def club_id(self) -> int:
        return self.club.id

    @property
    def user_id(self) -> int:
        return self.user.id


def get_club_context(request: Request, current_user: CurrentUser) -> ClubContext:
    """Check the caller's membership in the club named by the Club-ID header."""
    raw_club_id = request.headers.get(settings.club_header) or request.path_params.get("club_id")
    if not raw_club_id:
        raise ValidationError("Club ID required")
    try:
        club_id = int(raw_club_id)
    except ValueError:
        raise ValidationError("Club ID must be an integer")

    membership = next(
        (r for r in current_user.club_roles if r.club_id == club_id and r.club.is_active),
        None,
    )
    if membership is None:
        raise ForbiddenError("Access denied to this club")
    return ClubContext(user=current_user, club=membership.club, role=membership.role)


ClubScope = Annotated[ClubContext, Depends(get_club_context)]
