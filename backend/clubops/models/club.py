"""Club (tenant) and membership models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubops.db.base import Base, TimestampMixin


class ClubRole(str, Enum):
    """Role a user holds inside one club."""

    OWNER = "OWNER"
    MANAGER = "MANAGER"
    DJ = "DJ"
    STAFF = "STAFF"


class Club(Base, TimestampMixin):
    """A tenant. Every roster, queue, room and transaction belongs to one."""

    __tablename__ = "clubs"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    license_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    timezone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class UserClubRole(Base, TimestampMixin):
    """Membership of a user in a club."""

    __tablename__ = "user_club_roles"
    __table_args__ = (UniqueConstraint("user_id", "club_id", name="uq_user_club"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    role: Mapped[ClubRole] = mapped_column(SQLEnum(ClubRole), default=ClubRole.STAFF, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="club_roles")
    club: Mapped[Club] = relationship(Club, lazy="joined")


from clubops.models.user import User  # noqa: E402
