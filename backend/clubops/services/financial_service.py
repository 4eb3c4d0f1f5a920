"""
Financial Service
=================
Bar-fee collection and the revenue dashboard.

Transactions are append-only; every money movement is a new row.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from clubops.core.exceptions import NotFoundError
from clubops.models.dancer import Dancer, DancerSession
from clubops.models.financial import (
    FinancialTransaction,
    PaymentMethod,
    TransactionCategory,
    TransactionType,
)

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS_LIMIT = 10


def revenue_windows(now: datetime) -> Dict[str, datetime]:
    """Start of the current day, week (Sunday) and month, in UTC."""
    now = now.astimezone(timezone.utc)
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    # weekday(): Monday is 0, Sunday is 6
    start_of_week = start_of_day - timedelta(days=(start_of_day.weekday() + 1) % 7)
    start_of_month = start_of_day.replace(day=1)
    return {"daily": start_of_day, "weekly": start_of_week, "monthly": start_of_month}


class FinancialService:
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
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def collect_bar_fee(
        self,
        dancer_id: int,
        amount: float,
        payment_method: PaymentMethod,
        notes: Optional[str] = None,
    ) -> Tuple[FinancialTransaction, Dancer]:
        """Record a bar fee and mark the dancer's open sessions paid."""
        dancer = self.db.query(Dancer).filter(
            Dancer.id == dancer_id,
            Dancer.club_id == self.club_id,
        ).first()
        if not dancer:
            raise NotFoundError("Dancer not found")

        fee = Decimal(str(amount))
        try:
            transaction = FinancialTransaction(
                club_id=self.club_id,
                transaction_type=TransactionType.REVENUE,
                category=TransactionCategory.BAR_FEE,
                amount=fee,
                description=f"Bar fee - {dancer.stage_name}",
                reference=str(dancer.id),
                payment_method=payment_method,
                notes=notes,
                processed_at=self.clock(),
                created_by_id=self.user_id,
            )
            self.db.add(transaction)

            open_sessions = self.db.query(DancerSession).filter(
                DancerSession.dancer_id == dancer.id,
                DancerSession.check_out_time.is_(None),
            ).all()
            for session in open_sessions:
                session.bar_fee_paid = True
                session.bar_fee_amount = fee

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(transaction)
        logger.info(f"Bar fee collected: {dancer.stage_name}, amount: {fee}")
        return transaction, dancer

    def revenue_summary(self) -> Dict[str, float]:
        summary = {}
        for window, since in revenue_windows(self.clock()).items():
            total = self.db.query(func.coalesce(func.sum(FinancialTransaction.amount), 0)).filter(
                FinancialTransaction.club_id == self.club_id,
                FinancialTransaction.transaction_type == TransactionType.REVENUE,
                FinancialTransaction.processed_at >= since,
            ).scalar()
            summary[window] = float(total or 0)
        return summary

    def recent_transactions(self, limit: int = RECENT_TRANSACTIONS_LIMIT) -> List[FinancialTransaction]:
        return (
            self.db.query(FinancialTransaction)
            .filter(FinancialTransaction.club_id == self.club_id)
            .order_by(FinancialTransaction.processed_at.desc(), FinancialTransaction.id.desc())
            .limit(limit)
            .all()
        )

    def dashboard(self) -> Dict:
        return {
            "revenue": self.revenue_summary(),
            "recent_transactions": self.recent_transactions(),
        }
