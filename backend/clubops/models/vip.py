"""VIP room and booking models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    JSON, Boolean, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, Numeric, String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from clubops.db.base import Base, TimestampMixin, VersionMixin
from clubops.models.dancer import Dancer
from clubops.models.validators import non_negative, positive


class BookingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class VipRoom(Base, TimestampMixin, VersionMixin):
    """Private room billed by the hour.

    Occupied while it has a booking in status ACTIVE.
    """

    __tablename__ = "vip_rooms"

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    amenities: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    bookings: Mapped[List["VipBooking"]] = relationship("VipBooking", back_populates="room")

    @validates("hourly_rate")
    def _validate_rate(self, key, value):
        return non_negative(key, value)

    @validates("capacity")
    def _validate_capacity(self, key, value):
        return positive(key, value)


class VipBooking(Base, TimestampMixin):
    """A time-boxed reservation of a VIP room.

    ``end_time`` and ``total_amount`` are provisional while ACTIVE and are
    overwritten with the billed values at checkout.
    """

    __tablename__ = "vip_bookings"
    __table_args__ = (
        Index("idx_vip_bookings_room_status", "room_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    room_id: Mapped[int] = mapped_column(ForeignKey("vip_rooms.id"), nullable=False)
    dancer_id: Mapped[Optional[int]] = mapped_column(ForeignKey("dancers.id"), nullable=True)
    customer_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    # Six places hold rate x duration exactly (two-place rate, four-place duration).
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 6), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        SQLEnum(BookingStatus), default=BookingStatus.ACTIVE, nullable=False
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)

    room: Mapped[VipRoom] = relationship(VipRoom, back_populates="bookings", lazy="joined")
    dancer: Mapped[Optional[Dancer]] = relationship(Dancer, lazy="joined")
