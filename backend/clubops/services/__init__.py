# Services module

from clubops.services.dancer_service import DancerService
from clubops.services.financial_service import FinancialService
from clubops.services.queue_service import QueueService
from clubops.services.vip_booking_service import VipBookingService, billed_hours
from clubops.services.websocket_service import (
    ConnectionManager,
    EventType,
    WebSocketMessage,
    emit_club_event,
    manager,
)

__all__ = [
    # Roster
    "DancerService",
    # DJ queue
    "QueueService",
    # VIP rooms
    "VipBookingService",
    "billed_hours",
    # Financial
    "FinancialService",
    # Real-time
    "ConnectionManager",
    "EventType",
    "WebSocketMessage",
    "emit_club_event",
    "manager",
]
