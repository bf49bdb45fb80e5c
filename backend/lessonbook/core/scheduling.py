"""Scheduling Rules — pure overlap, availability and recurring-series logic.

Invariants:
    - Intervals are half-open: [start, start + duration) — back-to-back slots never conflict
    - validate_new_availability checks duration, then conflicts, then past time (first failure wins)
    - recurring_starts never returns fewer than 1 occurrence
    - Nothing here touches the DB: callers pass already-loaded (start, duration) pairs

Design Decisions:
    - Return the offending item instead of bool: callers log which slot/lesson collided
    - Recurring conflicts are found for the whole series up front, before any write
      (ADR: a series is either booked completely or not at all)
"""

from datetime import datetime, timedelta
from typing import Iterable, Protocol, TypeVar

from lessonbook.core.errors import BookingValidationError, TimeConflictError


ENTITY_MIN_DURATION: int = 1
ENTITY_MAX_DURATION: int = 480
DAYS_PER_WEEK: int = 7


class TimeSlot(Protocol):
    """Anything with a start time and a duration in minutes."""
    start_date_time: datetime
    duration: int


T = TypeVar("T", bound=TimeSlot)


def slot_end(start: datetime, duration: int) -> datetime:
    return start + timedelta(minutes=duration)


def overlaps(
    start: datetime, duration: int, other_start: datetime, other_duration: int,
) -> bool:
    """True when two half-open intervals share at least one instant."""
    return (
        start < slot_end(other_start, other_duration)
        and slot_end(start, duration) > other_start
    )


def find_conflict(
    start: datetime, duration: int, existing: Iterable[T],
) -> T | None:
    """First existing item overlapping [start, start + duration), else None."""
    for item in existing:
        if overlaps(start, duration, item.start_date_time, item.duration):
            return item
    return None


def validate_new_availability(
    start: datetime,
    duration: int,
    existing: Iterable[TimeSlot],
    now: datetime,
    min_duration: int = 15,
    max_duration: int = ENTITY_MAX_DURATION,
) -> None:
    """Raise the first rule a new availability slot breaks.

    Order matters for the error the teacher sees: an out-of-range
    duration is reported even when the slot also conflicts.
    """
    if duration < min_duration or duration > max_duration:
        raise BookingValidationError(
            f"Duration must be between {min_duration} and {max_duration} minutes.",
            "INVALID_DURATION",
        )
    if find_conflict(start, duration, existing) is not None:
        raise TimeConflictError()
    if start <= now:
        raise BookingValidationError(
            "Cannot schedule availability in the past.", "PAST_TIME",
        )


def recurring_starts(
    first_start: datetime, occurrences: int, interval_weeks: int,
) -> list[datetime]:
    """Start times of a weekly series anchored at first_start."""
    if occurrences < 1:
        raise BookingValidationError(
            "A recurring series needs at least one occurrence.",
            "INVALID_OCCURRENCES",
        )
    if interval_weeks < 1:
        raise BookingValidationError(
            "Interval must be at least one week.", "INVALID_INTERVAL",
        )
    step = timedelta(days=DAYS_PER_WEEK * interval_weeks)
    return [first_start + step * i for i in range(occurrences)]


def find_series_conflict(
    starts: list[datetime], duration: int, existing: Iterable[TimeSlot],
) -> int | None:
    """1-based index of the first occurrence that overlaps existing, else None."""
    existing = list(existing)
    for index, start in enumerate(starts, start=1):
        if find_conflict(start, duration, existing) is not None:
            return index
    return None


def covered_by_series(
    starts: list[datetime], duration: int, candidates: Iterable[T],
) -> list[T]:
    """Candidates overlapping any occurrence of the series."""
    return [
        item for item in candidates
        if any(
            overlaps(start, duration, item.start_date_time, item.duration)
            for start in starts
        )
    ]
