"""Dancer roster schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from clubops.schemas.pagination import CamelModel, Pagination


class DancerCreate(CamelModel):
    stage_name: str = Field(..., min_length=1, max_length=100)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None


class LicenseResponse(CamelModel):
    id: int
    license_type: str
    license_number: str
    issue_date: Optional[date] = None
    expiration_date: date
    issuing_authority: Optional[str] = None
    is_active: bool


class SessionResponse(CamelModel):
    id: int
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    bar_fee_paid: bool
    bar_fee_amount: Optional[float] = None


class DancerSummary(CamelModel):
    """Dancer as embedded in queue entries and bookings."""

    id: int
    stage_name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class DancerResponse(DancerSummary):
    club_id: int
    phone: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None
    is_active: bool
    licenses: List[LicenseResponse] = []
    sessions: List[SessionResponse] = []


class DancerListResponse(CamelModel):
    dancers: List[DancerResponse]
    pagination: Pagination


class DancerAlertsResponse(CamelModel):
    alerts: List[DancerResponse]
