"""
DJ Queue Service
================
Ordered performance slots per stage: enqueue at the tail, bulk reposition,
cancel. Every write claims the queue's version so concurrent writers on the
same queue cannot interleave.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from clubops.core.exceptions import NotFoundError
from clubops.models.dancer import Dancer
from clubops.models.queue import DjQueue, QueueEntry, QueueEntryStatus

logger = logging.getLogger(__name__)


class QueueService:
    """Queue operations scoped to one club."""

    def __init__(self, db: Session, club_id: int):
        self.db = db
        self.club_id = club_id

    def get_queue(self, stage_id: int) -> DjQueue:
        """Return the queue of a stage in this club."""
        queue = self.db.query(DjQueue).filter(
            DjQueue.club_id == self.club_id,
            DjQueue.stage_id == stage_id,
        ).first()
        if not queue:
            raise NotFoundError("Queue not found")
        return queue

    def active_entries(self, queue: DjQueue) -> List[QueueEntry]:
        """Non-cancelled entries, lowest position (next to perform) first."""
        return (
            self.db.query(QueueEntry)
            .filter(
                QueueEntry.queue_id == queue.id,
                QueueEntry.status != QueueEntryStatus.CANCELLED,
            )
            .order_by(QueueEntry.position.asc(), QueueEntry.id.asc())
            .all()
        )

    def enqueue(
        self,
        stage_id: int,
        dancer_id: int,
        song_title: Optional[str] = None,
        artist: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> QueueEntry:
        """Append a dancer to the tail of the stage's queue.

        The new position is one past the highest position ever used in the
        queue, cancelled entries included, or 1 for an empty queue.
        """
        queue = self.get_queue(stage_id)
        dancer = self.db.query(Dancer).filter(
            Dancer.id == dancer_id,
            Dancer.club_id == self.club_id,
            Dancer.is_active.is_(True),
        ).first()
        if not dancer:
            raise NotFoundError("Dancer not found")

        try:
            queue.claim(self.db)
            max_position = self.db.query(func.max(QueueEntry.position)).filter(
                QueueEntry.queue_id == queue.id
            ).scalar()
            entry = QueueEntry(
                queue_id=queue.id,
                dancer_id=dancer.id,
                position=1 if max_position is None else max_position + 1,
                song_title=song_title,
                artist=artist,
                duration=duration,
                status=QueueEntryStatus.ACTIVE,
            )
            self.db.add(entry)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(entry)
        logger.info(
            f"Dancer added to queue: {dancer.stage_name} to stage {stage_id} "
            f"at position {entry.position}"
        )
        return entry

    def reorder(self, stage_id: int, positions: Sequence[Tuple[int, int]]) -> None:
        """Overwrite the position of each (entry_id, position) pair.

        All pairs are applied in one transaction. Every entry must belong to
        the stage's queue; an unknown id fails the whole batch before any
        write.
        """
        queue = self.get_queue(stage_id)
        entry_ids = [entry_id for entry_id, _ in positions]
        entries = {
            e.id: e
            for e in self.db.query(QueueEntry).filter(
                QueueEntry.queue_id == queue.id,
                QueueEntry.id.in_(entry_ids),
            )
        } if entry_ids else {}

        missing = [entry_id for entry_id in entry_ids if entry_id not in entries]
        if missing:
            raise NotFoundError(f"Queue entries not found: {missing}")

        try:
            queue.claim(self.db)
            for entry_id, position in positions:
                entries[entry_id].position = position
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Queue reordered for stage {stage_id} ({len(entry_ids)} entries)")

    def cancel(self, stage_id: int, entry_id: int) -> QueueEntry:
        """Mark an entry cancelled. Its position is never reused."""
        queue = self.get_queue(stage_id)
        entry = self.db.query(QueueEntry).filter(
            QueueEntry.queue_id == queue.id,
            QueueEntry.id == entry_id,
        ).first()
        if not entry:
            raise NotFoundError("Queue entry not found")

        if entry.status != QueueEntryStatus.CANCELLED:
            try:
                queue.claim(self.db)
                entry.status = QueueEntryStatus.CANCELLED
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            self.db.refresh(entry)
            logger.info(f"Queue entry {entry_id} cancelled on stage {stage_id}")
        return entry
