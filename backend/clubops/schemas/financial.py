"""Financial schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from clubops.models.financial import PaymentMethod, TransactionType
from clubops.schemas.pagination import CamelModel


class BarFeeCreate(CamelModel):
    dancer_id: int = Field(..., gt=0)
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod
    notes: Optional[str] = Field(None, max_length=500)


class CreatedBy(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class TransactionResponse(CamelModel):
    id: int
    club_id: int
    transaction_type: TransactionType
    category: str
    amount: float
    description: Optional[str] = None
    reference: Optional[str] = None
    payment_method: PaymentMethod
    notes: Optional[str] = None
    processed_at: datetime
    created_by: Optional[CreatedBy] = None


class RevenueSummary(CamelModel):
    daily: float = 0
    weekly: float = 0
    monthly: float = 0


class DashboardResponse(CamelModel):
    revenue: RevenueSummary
    recent_transactions: List[TransactionResponse]
