"""Lesson ORM — a booked lesson between one teacher and one student.

Invariants:
    - price >= 0 and duration in [1, 480] (DB check constraints)
    - status transitions: Scheduled -> Completed | Cancelled (core/lesson_lifecycle.py)
    - recurring_series_id shared by every lesson created by one recurring booking

Design Decisions:
    - instrument and price copied onto the lesson at booking time: later profile edits
      never rewrite history or revenue reports
    - teacher/student loaded with selectin: every lesson listing shows both names
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Integer, Float, DateTime, ForeignKey, CheckConstraint, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lessonbook.core.domain_types import LessonStatus, utcnow
from lessonbook.db.base import Base


class Lesson(Base):
    """Booked lesson."""
    __tablename__ = "lessons"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_lessons_price_non_negative"),
        CheckConstraint(
            "duration >= 1 AND duration <= 480",
            name="ck_lessons_duration_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    instrument: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LessonStatus.SCHEDULED.value,
    )
    recurring_series_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True,
    )
    sheet_music_path: Mapped[str | None] = mapped_column(
        String(500), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow,
    )

    teacher: Mapped["User"] = relationship(
        "User", foreign_keys=[teacher_id], lazy="selectin",
    )
    student: Mapped["User"] = relationship(
        "User", foreign_keys=[student_id], lazy="selectin",
    )
