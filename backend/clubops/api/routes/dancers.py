"""Dancer roster routes."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, status

from clubops.core.config import settings
from clubops.core.rbac import ClubScope
from clubops.db.session import DbSession
from clubops.models.dancer import Dancer, DancerLicense
from clubops.schemas.dancer import (
    DancerAlertsResponse, DancerCreate, DancerListResponse, DancerResponse,
    LicenseResponse, SessionResponse,
)
from clubops.schemas.pagination import Pagination
from clubops.services.dancer_service import DancerService, active_licenses, open_session
from clubops.services.websocket_service import EventType, emit_club_event

router = APIRouter()


def _dancer_response(dancer: Dancer, licenses: Optional[List[DancerLicense]] = None) -> DancerResponse:
    session = open_session(dancer)
    response = DancerResponse.model_validate(dancer)
    response.licenses = [
        LicenseResponse.model_validate(lic)
        for lic in (active_licenses(dancer) if licenses is None else licenses)
    ]
    response.sessions = [SessionResponse.model_validate(session)] if session else []
    return response


@router.get("", response_model=DancerListResponse)
def list_dancers(
    db: DbSession,
    scope: ClubScope,
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Active dancers of the club, with active licenses and the open session."""
    dancers, total = DancerService(db, scope.club_id).list(search=search, page=page, limit=limit)
    return DancerListResponse(
        dancers=[_dancer_response(d) for d in dancers],
        pagination=Pagination.create(page, limit, total),
    )


@router.post("", response_model=DancerResponse, status_code=status.HTTP_201_CREATED)
def create_dancer(
    data: DancerCreate,
    db: DbSession,
    scope: ClubScope,
    background_tasks: BackgroundTasks,
):
    dancer = DancerService(db, scope.club_id, scope.user_id).create(data.model_dump())
    response = _dancer_response(dancer)
    background_tasks.add_task(
        emit_club_event, scope.club_id, EventType.DANCER_CREATED, response.model_dump(mode="json", by_alias=True),
    )
    return response


@router.get("/alerts", response_model=DancerAlertsResponse)
def license_alerts(db: DbSession, scope: ClubScope):
    """Dancers whose licenses have expired or expire soon."""
    alerts = DancerService(db, scope.club_id).license_alerts()
    return DancerAlertsResponse(alerts=[_dancer_response(d, licenses) for d, licenses in alerts])


@router.post("/{dancer_id}/check-in", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def check_in(dancer_id: int, db: DbSession, scope: ClubScope):
    return DancerService(db, scope.club_id).check_in(dancer_id)


@router.post("/{dancer_id}/check-out", response_model=SessionResponse)
def check_out(dancer_id: int, db: DbSession, scope: ClubScope):
    return DancerService(db, scope.club_id).check_out(dancer_id)
