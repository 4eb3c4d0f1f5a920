"""
VIP Booking Service
===================
Room occupancy and hourly billing.

A room holds at most one ACTIVE booking. Booking records a provisional
end time and amount from the requested duration; checkout replaces them
with the elapsed time rounded up to whole hours and appends a "VIP Room"
revenue transaction in the same commit.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from clubops.core.config import settings
from clubops.core.exceptions import ConflictError, NotFoundError, ValidationError
from clubops.models.dancer import Dancer
from clubops.models.financial import (
    FinancialTransaction,
    PaymentMethod,
    TransactionCategory,
    TransactionType,
)
from clubops.models.vip import BookingStatus, VipBooking, VipRoom

logger = logging.getLogger(__name__)

HOUR = timedelta(hours=1)
BOOKING_DURATION_PLACES = 4


def billed_hours(elapsed: timedelta) -> int:
    """Elapsed occupancy rounded up to the next whole hour, minimum 1."""
    hours, remainder = divmod(elapsed, HOUR)
    if remainder:
        hours += 1
    return max(1, hours)


def _booking_duration(duration_hours: float) -> Decimal:
    """Validate a requested duration and return it as an exact Decimal."""
    if duration_hours is None or not math.isfinite(duration_hours) or duration_hours <= 0:
        raise ValidationError("Duration must be a positive number of hours")
    if duration_hours > settings.max_booking_hours:
        raise ValidationError(f"Duration cannot exceed {settings.max_booking_hours} hours")
    duration = Decimal(str(duration_hours))
    if duration.as_tuple().exponent < -BOOKING_DURATION_PLACES:
        raise ValidationError(
            f"Duration supports at most {BOOKING_DURATION_PLACES} decimal places"
        )
    return duration


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VipBookingService:
    """VIP room operations scoped to one club."""

    def __init__(
        self,
        db: Session,
        club_id: int,
        user_id: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.club_id = club_id
        self.user_id = user_id
        self.clock = clock or _utcnow

    def list_rooms(self) -> List[Tuple[VipRoom, List[VipBooking]]]:
        """Active rooms ordered by name, each with its ACTIVE bookings."""
        rooms = (
            self.db.query(VipRoom)
            .filter(VipRoom.club_id == self.club_id, VipRoom.is_active.is_(True))
            .order_by(VipRoom.name)
            .all()
        )
        room_ids = [r.id for r in rooms]
        active = (
            self.db.query(VipBooking)
            .filter(VipBooking.room_id.in_(room_ids), VipBooking.status == BookingStatus.ACTIVE)
            .order_by(VipBooking.start_time)
            .all()
        ) if room_ids else []

        by_room = {room_id: [] for room_id in room_ids}
        for booking in active:
            by_room[booking.room_id].append(booking)
        return [(room, by_room[room.id]) for room in rooms]

    def get_room(self, room_id: int) -> VipRoom:
        room = self.db.query(VipRoom).filter(
            VipRoom.id == room_id,
            VipRoom.club_id == self.club_id,
        ).first()
        if not room:
            raise NotFoundError("VIP room not found")
        return room

    def active_booking(self, room: VipRoom) -> Optional[VipBooking]:
        """The room's ACTIVE booking. ``end_time`` is provisional and not consulted."""
        return self.db.query(VipBooking).filter(
            VipBooking.room_id == room.id,
            VipBooking.status == BookingStatus.ACTIVE,
        ).first()

    def book(
        self,
        room_id: int,
        duration_hours: float,
        dancer_id: Optional[int] = None,
        customer_name: Optional[str] = None,
    ) -> VipBooking:
        """Occupy a free room for ``duration_hours`` (fractional allowed)."""
        duration = _booking_duration(duration_hours)

        room = self.get_room(room_id)
        if not room.is_active:
            raise NotFoundError("VIP room not found")

        if dancer_id is not None:
            dancer = self.db.query(Dancer).filter(
                Dancer.id == dancer_id,
                Dancer.club_id == self.club_id,
            ).first()
            if not dancer:
                raise NotFoundError("Dancer not found")

        if self.active_booking(room):
            raise ConflictError("VIP room is currently occupied")

        start_time = self.clock()
        try:
            room.claim(self.db)
            booking = VipBooking(
                room_id=room.id,
                dancer_id=dancer_id,
                customer_name=customer_name,
                start_time=start_time,
                end_time=start_time + timedelta(hours=duration_hours),
                total_amount=room.hourly_rate * duration,
                status=BookingStatus.ACTIVE,
                created_by_id=self.user_id,
            )
            self.db.add(booking)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"VIP room booked: {room.name} for {duration_hours} hours")
        return booking

    def checkout(
        self,
        room_id: int,
        payment_method: PaymentMethod = PaymentMethod.CASH,
    ) -> VipBooking:
        """Close the room's active booking and bill the elapsed time."""
        room = self.get_room(room_id)
        booking = self.active_booking(room)
        if not booking:
            raise NotFoundError("No active booking found")

        checkout_time = self.clock()
        hours = billed_hours(checkout_time - _as_utc(booking.start_time))
        amount = room.hourly_rate * hours

        try:
            room.claim(self.db)
            booking.end_time = checkout_time
            booking.total_amount = amount
            booking.status = BookingStatus.COMPLETED
            self.db.add(FinancialTransaction(
                club_id=self.club_id,
                transaction_type=TransactionType.REVENUE,
                category=TransactionCategory.VIP_ROOM,
                amount=amount,
                description=f"{room.name} - {hours} hours",
                reference=str(booking.id),
                payment_method=payment_method,
                processed_at=checkout_time,
                created_by_id=self.user_id,
            ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"VIP room checkout: {room.name}, {hours} hours, amount: {amount}")
        return booking
