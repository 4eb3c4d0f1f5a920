"""SQLAlchemy models."""

from clubops.models.user import User
from clubops.models.club import Club, ClubRole, UserClubRole
from clubops.models.dancer import Dancer, DancerLicense, DancerSession
from clubops.models.queue import Stage, DjQueue, QueueEntry, QueueEntryStatus
from clubops.models.vip import VipRoom, VipBooking, BookingStatus
from clubops.models.financial import (
    FinancialTransaction,
    TransactionType,
    TransactionCategory,
    PaymentMethod,
)

__all__ = [
    "User",
    "Club",
    "ClubRole",
    "UserClubRole",
    "Dancer",
    "DancerLicense",
    "DancerSession",
    "Stage",
    "DjQueue",
    "QueueEntry",
    "QueueEntryStatus",
    "VipRoom",
    "VipBooking",
    "BookingStatus",
    "FinancialTransaction",
    "TransactionType",
    "TransactionCategory",
    "PaymentMethod",
]
