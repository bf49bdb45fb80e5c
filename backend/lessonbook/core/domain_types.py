"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching in domain logic
    - Enum values are the exact strings persisted in the DB and returned by the API

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - Naive UTC datetimes everywhere: SQLite drops tzinfo on read, so aware values
      are normalized once at the boundary (to_naive_utc) and never compared mixed
"""

from datetime import datetime, timezone
from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles — each role gets its own dashboard."""
    ADMIN = "Admin"
    TEACHER = "Teacher"
    STUDENT = "Student"


class LessonMode(str, Enum):
    """Where the lesson takes place."""
    IN_PERSON = "In-Person"
    VIRTUAL = "Virtual"


class LessonStatus(str, Enum):
    """Lesson lifecycle — Scheduled is the only non-terminal state."""
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ReferralSource(str, Enum):
    """Suggested referral sources. Stored as free text, so others are accepted."""
    SOCIAL_MEDIA = "Social Media"
    FRIEND = "Friend"
    FLYER = "Flyer"
    SEARCH = "Search"
    OTHER = "Other"


# ─── Time ────────────────────────────────────────────────────────

def to_naive_utc(value: datetime) -> datetime:
    """Convert aware datetimes to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ─── Instruments ─────────────────────────────────────────────────

def split_instruments(value: str | None) -> list[str]:
    """Parse the comma-separated instrument column into a clean list."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def join_instruments(instruments: list[str]) -> str:
    return ",".join(i.strip() for i in instruments if i.strip())
