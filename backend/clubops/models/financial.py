"""Financial transaction ledger.

Append-only: once flushed, a transaction cannot be modified or deleted
through the ORM. Corrections are made with new offsetting entries.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Index, Numeric, String, event, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubops.db.base import Base
from clubops.models.user import User


class TransactionType(str, Enum):
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"


class TransactionCategory:
    VIP_ROOM = "VIP Room"
    BAR_FEE = "Bar Fee"


class FinancialTransaction(Base):
    """Immutable money movement recorded against a club."""

    __tablename__ = "financial_transactions"
    __table_args__ = (
        Index("idx_fin_tx_club_processed", "club_id", "processed_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False)
    transaction_type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType), default=TransactionType.REVENUE, nullable=False
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    payment_method: Mapped[PaymentMethod] = mapped_column(SQLEnum(PaymentMethod), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)

    created_by: Mapped[Optional[User]] = relationship(User, lazy="joined")


@event.listens_for(FinancialTransaction, "before_update")
def _reject_update(mapper, connection, target):
    raise ValueError(f"Financial transaction {target.id} is append-only and cannot be modified")


@event.listens_for(FinancialTransaction, "before_delete")
def _reject_delete(mapper, connection, target):
    raise ValueError(f"Financial transaction {target.id} is append-only and cannot be deleted")
