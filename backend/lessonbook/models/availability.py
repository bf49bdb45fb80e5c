"""Availability ORM — an open, bookable slot offered by a teacher.

Invariants:
    - duration in [1, 480] minutes (DB check constraint)
    - A slot is deleted when booked; it never coexists with the lesson made from it

Design Decisions:
    - No "booked" flag: consuming the row keeps the open-slot query a plain SELECT
"""

from datetime import datetime

from sqlalchemy import Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lessonbook.core.domain_types import utcnow
from lessonbook.db.base import Base


class Availability(Base):
    """Bookable time window."""
    __tablename__ = "availabilities"
    __table_args__ = (
        CheckConstraint(
            "duration >= 1 AND duration <= 480",
            name="ck_availabilities_duration_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    start_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow,
    )

    teacher: Mapped["User"] = relationship("User", lazy="selectin")
