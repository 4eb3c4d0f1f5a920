"""Dancer roster models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean, Date, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from clubops.db.base import Base, TimestampMixin
from clubops.models.validators import positive


class Dancer(Base, TimestampMixin):
    """A performer on a club's roster."""

    __tablename__ = "dancers"
    __table_args__ = (
        UniqueConstraint("club_id", "stage_name", name="uq_dancer_club_stage_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    stage_name: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)

    licenses: Mapped[List["DancerLicense"]] = relationship(
        "DancerLicense", back_populates="dancer", order_by="DancerLicense.expiration_date"
    )
    sessions: Mapped[List["DancerSession"]] = relationship(
        "DancerSession", back_populates="dancer", order_by="DancerSession.check_in_time.desc()"
    )


class DancerLicense(Base, TimestampMixin):
    """Entertainment/work license with an expiry date."""

    __tablename__ = "dancer_licenses"

    id: Mapped[int] = mapped_column(primary_key=True)
    dancer_id: Mapped[int] = mapped_column(ForeignKey("dancers.id"), nullable=False, index=True)
    license_type: Mapped[str] = mapped_column(String(50), nullable=False)
    license_number: Mapped[str] = mapped_column(String(100), nullable=False)
    issue_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    expiration_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    issuing_authority: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    dancer: Mapped[Dancer] = relationship(Dancer, back_populates="licenses")


class DancerSession(Base):
    """One shift at the club, from check-in to check-out."""

    __tablename__ = "dancer_sessions"

    id: Mapped[int] = mapped_column(primary_key=True)
    dancer_id: Mapped[int] = mapped_column(ForeignKey("dancers.id"), nullable=False, index=True)
    check_in_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    check_out_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    bar_fee_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    bar_fee_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    dancer: Mapped[Dancer] = relationship(Dancer, back_populates="sessions")

    @validates("bar_fee_amount")
    def _validate_fee(self, key, value):
        return positive(key, value)
