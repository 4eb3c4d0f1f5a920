"""SQLAlchemy declarative base and common utilities."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.orm.attributes import set_committed_value

from clubops.core.exceptions import ConflictError


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class VersionMixin:
    """Optimistic locking via a version counter.

    Rows that guard a check-then-act sequence (a stage queue, a VIP room)
    carry a ``version`` column. ``claim()`` bumps it with a conditional
    UPDATE inside the caller's transaction, so two requests racing on the
    same row cannot both commit.
    """

    version: Mapped[int] = mapped_column(Integer, default=1, server_default="1", nullable=False)

    def claim(self, db: Session) -> None:
        """Increment ``version`` if nobody else has since this row was read.

        Raises ConflictError when the row was modified concurrently.
        """
        cls = type(self)
        claimed = (
            db.query(cls)
            .filter(cls.id == self.id, cls.version == self.version)
            .update({cls.version: cls.version + 1}, synchronize_session=False)
        )
        if not claimed:
            raise ConflictError(
                f"{cls.__name__} {self.id} was modified by another request. Please retry."
            )
        set_committed_value(self, "version", self.version + 1)
