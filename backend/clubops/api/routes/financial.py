"""Financial routes: revenue dashboard and bar-fee collection."""

from fastapi import APIRouter, BackgroundTasks, status

from clubops.core.rbac import ClubScope
from clubops.db.session import DbSession
from clubops.schemas.financial import (
    BarFeeCreate, DashboardResponse, RevenueSummary, TransactionResponse,
)
from clubops.services.financial_service import FinancialService
from clubops.services.websocket_service import EventType, emit_club_event

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(db: DbSession, scope: ClubScope):
    """Revenue for today, this week and this month plus the latest transactions."""
    dashboard = FinancialService(db, scope.club_id).dashboard()
    return DashboardResponse(
        revenue=RevenueSummary(**dashboard["revenue"]),
        recent_transactions=[
            TransactionResponse.model_validate(t) for t in dashboard["recent_transactions"]
        ],
    )


@router.post("/bar-fee", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def collect_bar_fee(
    data: BarFeeCreate,
    db: DbSession,
    scope: ClubScope,
    background_tasks: BackgroundTasks,
):
    transaction, dancer = FinancialService(db, scope.club_id, scope.user_id).collect_bar_fee(
        data.dancer_id,
        data.amount,
        data.payment_method,
        notes=data.notes,
    )
    background_tasks.add_task(
        emit_club_event, scope.club_id, EventType.BAR_FEE,
        {"dancer": dancer.stage_name, "amount": float(transaction.amount)},
    )
    return TransactionResponse.model_validate(transaction)
