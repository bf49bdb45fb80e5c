"""TeacherProfile ORM — what a teacher teaches and charges.

Invariants:
    - Exactly one profile per teacher user (user_id unique)
    - instrument_taught is a comma-separated list, at least one entry
    - custom_lesson_rate NULL means "use the platform default rate"
"""

from datetime import datetime

from sqlalchemy import String, Float, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lessonbook.core.domain_types import utcnow, split_instruments
from lessonbook.db.base import Base


class TeacherProfile(Base):
    """Teacher-specific details."""
    __tablename__ = "teacher_profiles"
    __table_args__ = (
        CheckConstraint(
            "custom_lesson_rate IS NULL OR custom_lesson_rate >= 0",
            name="ck_teacher_profiles_rate_non_negative",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    instrument_taught: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    custom_lesson_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow,
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="teacher_profile", lazy="selectin",
    )

    @property
    def instruments(self) -> list[str]:
        return split_instruments(self.instrument_taught)
