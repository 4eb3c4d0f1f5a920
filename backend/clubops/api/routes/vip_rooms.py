"""VIP room booking and checkout routes."""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Body, status

from clubops.core.rbac import ClubScope
from clubops.db.session import DbSession
from clubops.schemas.vip import (
    BookingCreate, BookingResponse, CheckoutRequest, RoomListResponse, RoomResponse,
)
from clubops.services.vip_booking_service import VipBookingService
from clubops.services.websocket_service import EventType, emit_club_event

router = APIRouter()


@router.get("", response_model=RoomListResponse)
def list_rooms(db: DbSession, scope: ClubScope):
    """Active rooms with their current bookings."""
    rooms = []
    for room, bookings in VipBookingService(db, scope.club_id).list_rooms():
        response = RoomResponse.model_validate(room)
        response.bookings = [BookingResponse.model_validate(b) for b in bookings]
        response.is_occupied = bool(bookings)
        rooms.append(response)
    return RoomListResponse(rooms=rooms)


@router.post("/{room_id}/book", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def book_room(
    room_id: int,
    data: BookingCreate,
    db: DbSession,
    scope: ClubScope,
    background_tasks: BackgroundTasks,
):
    booking = VipBookingService(db, scope.club_id, scope.user_id).book(
        room_id,
        data.duration,
        dancer_id=data.dancer_id,
        customer_name=data.customer_name,
    )
    response = BookingResponse.model_validate(booking)
    background_tasks.add_task(
        emit_club_event, scope.club_id, EventType.VIP_BOOKED, response.model_dump(mode="json", by_alias=True),
    )
    return response


@router.put("/{room_id}/checkout", response_model=BookingResponse)
def checkout_room(
    room_id: int,
    db: DbSession,
    scope: ClubScope,
    background_tasks: BackgroundTasks,
    data: Optional[CheckoutRequest] = Body(None),
):
    """Close the active booking and bill whole hours, rounded up."""
    data = data or CheckoutRequest()
    booking = VipBookingService(db, scope.club_id, scope.user_id).checkout(
        room_id, payment_method=data.payment_method,
    )
    response = BookingResponse.model_validate(booking)
    background_tasks.add_task(
        emit_club_event, scope.club_id, EventType.VIP_CHECKOUT, response.model_dump(mode="json", by_alias=True),
    )
    return response
