"""Stage and DJ queue models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubops.db.base import Base, TimestampMixin, VersionMixin
from clubops.models.dancer import Dancer


class QueueEntryStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"


class Stage(Base, TimestampMixin):
    """A physical performance area inside a club."""

    __tablename__ = "stages"

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    max_capacity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class DjQueue(Base, TimestampMixin, VersionMixin):
    """The performance queue of one stage.

    ``version`` is claimed by every write to the queue's entries.
    """

    __tablename__ = "dj_queues"

    id: Mapped[int] = mapped_column(primary_key=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    stage_id: Mapped[int] = mapped_column(ForeignKey("stages.id"), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    stage: Mapped[Stage] = relationship(Stage)
    entries: Mapped[List["QueueEntry"]] = relationship("QueueEntry", back_populates="queue")


class QueueEntry(Base, TimestampMixin):
    """One dancer's scheduled turn. Cancelled, never deleted."""

    __tablename__ = "queue_entries"
    __table_args__ = (
        Index("idx_queue_entries_queue_position", "queue_id", "position"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    queue_id: Mapped[int] = mapped_column(ForeignKey("dj_queues.id"), nullable=False)
    dancer_id: Mapped[int] = mapped_column(ForeignKey("dancers.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    song_title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    artist: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # seconds
    status: Mapped[QueueEntryStatus] = mapped_column(
        SQLEnum(QueueEntryStatus), default=QueueEntryStatus.ACTIVE, nullable=False
    )

    queue: Mapped[DjQueue] = relationship(DjQueue, back_populates="entries")
    dancer: Mapped[Dancer] = relationship(Dancer, lazy="joined")
