"""DJ queue routes."""

from fastapi import APIRouter, BackgroundTasks, status

from clubops.core.rbac import ClubScope
from clubops.db.session import DbSession
from clubops.schemas.queue import (
    QueueEntryCreate, QueueEntryResponse, QueueResponse, ReorderRequest, ReorderResponse,
    StageResponse,
)
from clubops.services.queue_service import QueueService
from clubops.services.websocket_service import EventType, emit_club_event

router = APIRouter()


def _queue_event(stage_id: int, action: str, entry: QueueEntryResponse) -> dict:
    return {"stageId": stage_id, "action": action, "entry": entry.model_dump(mode="json", by_alias=True)}


@router.get("/{stage_id}", response_model=QueueResponse)
def get_queue(stage_id: int, db: DbSession, scope: ClubScope):
    """The stage's queue with its non-cancelled entries, next performer first."""
    service = QueueService(db, scope.club_id)
    queue = service.get_queue(stage_id)
    return QueueResponse(
        id=queue.id,
        name=queue.name,
        stage_id=queue.stage_id,
        stage=StageResponse.model_validate(queue.stage),
        entries=[QueueEntryResponse.model_validate(e) for e in service.active_entries(queue)],
    )


@router.post("/{stage_id}/add", response_model=QueueEntryResponse, status_code=status.HTTP_201_CREATED)
def add_to_queue(
    stage_id: int,
    data: QueueEntryCreate,
    db: DbSession,
    scope: ClubScope,
    background_tasks: BackgroundTasks,
):
    entry = QueueService(db, scope.club_id).enqueue(
        stage_id,
        data.dancer_id,
        song_title=data.song_title,
        artist=data.artist,
        duration=data.duration,
    )
    response = QueueEntryResponse.model_validate(entry)
    background_tasks.add_task(
        emit_club_event, scope.club_id, EventType.QUEUE_UPDATED, _queue_event(stage_id, "added", response),
    )
    return response


@router.put("/{stage_id}/reorder", response_model=ReorderResponse)
def reorder_queue(
    stage_id: int,
    data: ReorderRequest,
    db: DbSession,
    scope: ClubScope,
    background_tasks: BackgroundTasks,
):
    """Apply new positions to a set of entries in one transaction."""
    QueueService(db, scope.club_id).reorder(stage_id, [(e.id, e.position) for e in data.entries])
    background_tasks.add_task(
        emit_club_event, scope.club_id, EventType.QUEUE_REORDERED, {"stageId": stage_id},
    )
    return ReorderResponse(success=True)


@router.delete("/{stage_id}/entries/{entry_id}", response_model=QueueEntryResponse)
def cancel_entry(
    stage_id: int,
    entry_id: int,
    db: DbSession,
    scope: ClubScope,
    background_tasks: BackgroundTasks,
):
    entry = QueueService(db, scope.club_id).cancel(stage_id, entry_id)
    response = QueueEntryResponse.model_validate(entry)
    background_tasks.add_task(
        emit_club_event, scope.club_id, EventType.QUEUE_UPDATED, _queue_event(stage_id, "removed", response),
    )
    return response
