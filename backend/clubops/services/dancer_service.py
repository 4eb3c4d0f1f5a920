"""Dancer roster: search, registration, license alerts and shift sessions."""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from clubops.core.config import settings
from clubops.core.exceptions import ConflictError, NotFoundError
from clubops.models.dancer import Dancer, DancerLicense, DancerSession
from clubops.schemas.pagination import paginate_query

logger = logging.getLogger(__name__)


def active_licenses(dancer: Dancer) -> List[DancerLicense]:
    """Active licenses, soonest expiry first."""
    return [lic for lic in dancer.licenses if lic.is_active]


def open_session(dancer: Dancer) -> Optional[DancerSession]:
    """Latest session without a check-out time, if any."""
    return next((s for s in dancer.sessions if s.check_out_time is None), None)


class DancerService:
    def __init__(self, db: Session, club_id: int, user_id: Optional[int] = None):
        self.db = db
        self.club_id = club_id
        self.user_id = user_id

    def get(self, dancer_id: int) -> Dancer:
        dancer = self.db.query(Dancer).filter(
            Dancer.id == dancer_id,
            Dancer.club_id == self.club_id,
        ).first()
        if not dancer:
            raise NotFoundError("Dancer not found")
        return dancer

    def list(self, search: Optional[str] = None, page: int = 1, limit: int = 50) -> Tuple[List[Dancer], int]:
        query = (
            self.db.query(Dancer)
            .options(selectinload(Dancer.licenses), selectinload(Dancer.sessions))
            .filter(Dancer.club_id == self.club_id, Dancer.is_active.is_(True))
        )
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Dancer.stage_name.ilike(pattern),
                Dancer.first_name.ilike(pattern),
                Dancer.last_name.ilike(pattern),
            ))
        return paginate_query(query.order_by(Dancer.stage_name, Dancer.id), page, limit)

    def create(self, data: Dict[str, Any]) -> Dancer:
        stage_name = data["stage_name"].strip()
        duplicate = self.db.query(Dancer.id).filter(
            Dancer.club_id == self.club_id,
            Dancer.stage_name == stage_name,
        ).first()
        if duplicate:
            raise ConflictError("Stage name already exists")

        dancer = Dancer(
            **{**data, "stage_name": stage_name},
            club_id=self.club_id,
            created_by_id=self.user_id,
        )
        self.db.add(dancer)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent create with the same name
            self.db.rollback()
            raise ConflictError("Stage name already exists")

        self.db.refresh(dancer)
        logger.info(f"Dancer created: {dancer.stage_name} (club {self.club_id})")
        return dancer

    def license_alerts(self, today: Optional[date] = None) -> List[Tuple[Dancer, List[DancerLicense]]]:
        """Dancers with an active license expired or expiring within the alert window."""
        today = today or datetime.now(timezone.utc).date()
        cutoff = today + timedelta(days=settings.license_alert_days)
        licenses = (
            self.db.query(DancerLicense)
            .join(Dancer, DancerLicense.dancer_id == Dancer.id)
            .filter(
                Dancer.club_id == self.club_id,
                Dancer.is_active.is_(True),
                DancerLicense.is_active.is_(True),
                DancerLicense.expiration_date <= cutoff,
            )
            .order_by(DancerLicense.expiration_date, DancerLicense.id)
            .all()
        )

        alerts: Dict[int, Tuple[Dancer, List[DancerLicense]]] = {}
        for lic in licenses:
            alerts.setdefault(lic.dancer_id, (lic.dancer, []))[1].append(lic)
        return list(alerts.values())

    def check_in(self, dancer_id: int) -> DancerSession:
        dancer = self.get(dancer_id)
        if not dancer.is_active:
            raise NotFoundError("Dancer not found")
        if open_session(dancer):
            raise ConflictError("Dancer is already checked in")

        session = DancerSession(dancer_id=dancer.id, check_in_time=datetime.now(timezone.utc))
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        logger.info(f"Dancer checked in: {dancer.stage_name}")
        return session

    def check_out(self, dancer_id: int) -> DancerSession:
        dancer = self.get(dancer_id)
        session = open_session(dancer)
        if not session:
            raise NotFoundError("Dancer is not checked in")

        session.check_out_time = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(session)
        logger.info(f"Dancer checked out: {dancer.stage_name}")
        return session
