"""DJ queue schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from clubops.models.queue import QueueEntryStatus
from clubops.schemas.dancer import DancerSummary
from clubops.schemas.pagination import CamelModel


class QueueEntryCreate(CamelModel):
    dancer_id: int = Field(..., gt=0)
    song_title: Optional[str] = Field(None, max_length=200)
    artist: Optional[str] = Field(None, max_length=200)
    duration: Optional[int] = Field(None, gt=0, description="Song length in seconds")


class ReorderItem(CamelModel):
    id: int = Field(..., gt=0)
    position: int


class ReorderRequest(CamelModel):
    entries: List[ReorderItem]

    @field_validator("entries")
    @classmethod
    def unique_ids_and_positions(cls, entries: List[ReorderItem]) -> List[ReorderItem]:
        if len({e.id for e in entries}) != len(entries):
            raise ValueError("Each entry may appear only once")
        if len({e.position for e in entries}) != len(entries):
            raise ValueError("Positions must be unique")
        return entries


class QueueEntryResponse(CamelModel):
    id: int
    queue_id: int
    dancer_id: int
    position: int
    song_title: Optional[str] = None
    artist: Optional[str] = None
    duration: Optional[int] = None
    status: QueueEntryStatus
    created_at: Optional[datetime] = None
    dancer: DancerSummary


class StageResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    max_capacity: int


class QueueResponse(CamelModel):
    id: int
    name: str
    stage_id: int
    stage: StageResponse
    entries: List[QueueEntryResponse]


class ReorderResponse(CamelModel):
    success: bool = True
