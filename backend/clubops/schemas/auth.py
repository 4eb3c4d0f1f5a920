"""Authentication schemas."""

from typing import List, Optional

from pydantic import EmailStr, Field, model_validator

from clubops.models.club import ClubRole
from clubops.schemas.pagination import CamelModel


class LoginRequest(CamelModel):
    """Login request body."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RegisterRequest(CamelModel):
    """Sign-up of a new club owner together with their club."""

    full_name: str = Field(..., min_length=1, max_length=200)
    club_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ClubMembership(CamelModel):
    id: int
    name: str
    role: ClubRole


class ClubResponse(CamelModel):
    id: int
    name: str


class UserResponse(CamelModel):
    """User as returned by /auth endpoints, with the clubs it can act in."""

    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    clubs: List[ClubMembership] = []

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            clubs=[
                ClubMembership(id=r.club.id, name=r.club.name, role=r.role)
                for r in user.club_roles
            ],
        )


class LoginResponse(CamelModel):
    token: str
    user: UserResponse


class MeResponse(CamelModel):
    user: UserResponse


class RegisterResponse(LoginResponse):
    club: ClubResponse
