"""User ORM — an account of any role (Admin, Teacher, Student).

Invariants:
    - email is unique and stored lower-cased
    - password_hash is a bcrypt hash, never a plain password
    - role is one of UserRole values

Design Decisions:
    - Integer autoincrement ids: ids travel in URLs (/teacher/dashboard/{id}) and stay short
    - Profiles live in their own tables: only teachers and students have one
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lessonbook.core.domain_types import utcnow
from lessonbook.db.base import Base


class User(Base):
    """Platform account."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    contact_info: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow,
    )

    # Relationships
    teacher_profile: Mapped[Optional["TeacherProfile"]] = relationship(
        "TeacherProfile", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
    student_profile: Mapped[Optional["StudentProfile"]] = relationship(
        "StudentProfile", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
