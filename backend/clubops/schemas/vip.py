"""VIP room schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from clubops.core.config import settings
from clubops.models.financial import PaymentMethod
from clubops.models.vip import BookingStatus
from clubops.schemas.dancer import DancerSummary
from clubops.schemas.pagination import CamelModel


class BookingCreate(CamelModel):
    dancer_id: Optional[int] = Field(None, gt=0)
    customer_name: Optional[str] = Field(None, max_length=200)
    duration: float = Field(
        ..., gt=0, le=settings.max_booking_hours, allow_inf_nan=False,
        description="Requested duration in hours",
    )


class CheckoutRequest(CamelModel):
    payment_method: PaymentMethod = PaymentMethod.CASH


class RoomSummary(CamelModel):
    id: int
    name: str
    hourly_rate: float


class BookingResponse(CamelModel):
    id: int
    room_id: int
    dancer_id: Optional[int] = None
    customer_name: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    total_amount: float
    status: BookingStatus
    room: RoomSummary
    dancer: Optional[DancerSummary] = None


class RoomResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    hourly_rate: float
    capacity: int
    amenities: Optional[List[str]] = None
    is_occupied: bool = False
    bookings: List[BookingResponse] = []


class RoomListResponse(CamelModel):
    rooms: List[RoomResponse]
