"""StudentProfile ORM — instrument interest and how the student found the platform.

Invariants:
    - Exactly one profile per student user (user_id unique)
    - referral_source is free text; ReferralSource lists the suggested values
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lessonbook.core.domain_types import utcnow
from lessonbook.db.base import Base


class StudentProfile(Base):
    """Student-specific details."""
    __tablename__ = "student_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    instrument_interest: Mapped[str] = mapped_column(String(100), nullable=False)
    referral_source: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow,
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="student_profile", lazy="selectin",
    )
