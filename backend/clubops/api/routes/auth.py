"""Authentication routes."""

import logging

from fastapi import APIRouter, Request, status
from sqlalchemy.exc import IntegrityError

from clubops.core.exceptions import AuthError, ConflictError
from clubops.core.rate_limit import limiter
from clubops.core.rbac import CurrentUser, get_bearer_token
from clubops.core.security import (
    blacklist_token, create_access_token, get_password_hash, verify_password,
)
from clubops.db.session import DbSession
from clubops.models.club import Club, ClubRole, UserClubRole
from clubops.models.user import User
from clubops.schemas.auth import (
    ClubResponse, LoginRequest, LoginResponse, MeResponse, RegisterRequest,
    RegisterResponse, UserResponse,
)

logger = logging.getLogger("auth")

router = APIRouter()


def _issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "email": user.email})


@router.post("/login", response_model=LoginResponse)
@limiter.limit("5/minute")
def login(request: Request, login_request: LoginRequest, db: DbSession):
    """Authenticate a user and return a JWT with the user's club memberships."""
    client_ip = request.client.host if request.client else "unknown"
    user = db.query(User).filter(User.email == login_request.email.lower()).first()

    if not user or not verify_password(login_request.password, user.password_hash):
        logger.warning(f"Failed login attempt for email: {login_request.email} from IP: {client_ip}")
        raise AuthError("Invalid credentials")
    if not user.is_active:
        logger.warning(f"Login attempt for inactive user: {user.email} (ID: {user.id}) from IP: {client_ip}")
        raise AuthError("Invalid credentials")

    logger.info(f"Successful login: {user.email} (ID: {user.id}) from IP: {client_ip}")
    return LoginResponse(token=_issue_token(user), user=UserResponse.from_user(user))


@router.get("/me", response_model=MeResponse)
def get_me(current_user: CurrentUser):
    """Get the authenticated user and the clubs they belong to."""
    return MeResponse(user=UserResponse.from_user(current_user))


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
def register(request: Request, data: RegisterRequest, db: DbSession):
    """Sign up a club owner: creates the user, the club and the OWNER membership."""
    email = data.email.lower()
    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError("Email already registered")

    first_name, _, last_name = data.full_name.strip().partition(" ")
    user = User(
        email=email,
        password_hash=get_password_hash(data.password),
        first_name=first_name,
        last_name=last_name.strip() or None,
        phone=data.phone,
    )
    club = Club(name=data.club_name.strip(), email=email, phone=data.phone)
    user.club_roles.append(UserClubRole(club=club, role=ClubRole.OWNER))
    db.add_all([user, club])
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered")

    db.refresh(user)
    logger.info(f"Registered owner {user.email} (ID: {user.id}) with club {club.name} (ID: {club.id})")
    return RegisterResponse(
        token=_issue_token(user),
        user=UserResponse.from_user(user),
        club=ClubResponse(id=club.id, name=club.name),
    )


@router.post("/logout")
@limiter.limit("30/minute")
def logout(request: Request, current_user: CurrentUser):
    """Revoke the presented JWT so it can no longer be used."""
    token = get_bearer_token(request)
    if token:
        blacklist_token(token)
    logger.info(f"User logged out: {current_user.email} (ID: {current_user.id})")
    return {"message": "Logged out successfully"}
