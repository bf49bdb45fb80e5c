"""Lesson schemas — availability, booking and profile payloads.

Invariants:
    - Availability duration bounded [1, 480]; datetimes normalized to naive UTC
    - Recurring bookings: 1-52 occurrences, 1-12 weeks apart
    - instruments_taught cleaned; an all-blank list is rejected
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from lessonbook.core.domain_types import LessonMode
from lessonbook.schemas.lessons import (
    AddAvailabilityRequest, BookLessonRequest, BookRecurringRequest,
)
from lessonbook.schemas.profiles import UpdateTeacherProfileRequest


# --- AddAvailabilityRequest ----------------------------------------------------

def test_aware_start_normalized_to_naive_utc():
    start = datetime(2030, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
    request = AddAvailabilityRequest(teacher_id=1, start_date_time=start, duration=60)
    assert request.start_date_time == datetime(2030, 1, 1, 17, 0)
    assert request.start_date_time.tzinfo is None


@pytest.mark.parametrize("duration", [0, 481])
def test_availability_duration_bounds(duration):
    with pytest.raises(ValidationError):
        AddAvailabilityRequest(
            teacher_id=1, start_date_time=datetime(2030, 1, 1), duration=duration,
        )


# --- Booking ------------------------------------------------------------------

def test_book_request_parses_mode():
    request = BookLessonRequest(availability_id=1, student_id=2, mode="In-Person")
    assert request.mode is LessonMode.IN_PERSON
    assert request.instrument is None


def test_book_request_rejects_unknown_mode():
    with pytest.raises(ValidationError):
        BookLessonRequest(availability_id=1, student_id=2, mode="Telepathic")


def test_recurring_interval_defaults_to_weekly():
    request = BookRecurringRequest(
        availability_id=1, student_id=2, mode="Virtual", occurrences=4,
    )
    assert request.interval_weeks == 1


@pytest.mark.parametrize(
    "occurrences, interval_weeks", [(0, 1), (53, 1), (4, 0), (4, 13)],
)
def test_recurring_bounds(occurrences, interval_weeks):
    with pytest.raises(ValidationError):
        BookRecurringRequest(
            availability_id=1, student_id=2, mode="Virtual",
            occurrences=occurrences, interval_weeks=interval_weeks,
        )


# --- UpdateTeacherProfileRequest ----------------------------------------------

def test_instruments_taught_cleaned():
    request = UpdateTeacherProfileRequest(instruments_taught=[" Piano ", "", "Flute"])
    assert request.instruments_taught == ["Piano", "Flute"]


def test_blank_instruments_taught_rejected():
    with pytest.raises(ValidationError):
        UpdateTeacherProfileRequest(instruments_taught=["  "])


def test_negative_rate_rejected():
    with pytest.raises(ValidationError):
        UpdateTeacherProfileRequest(custom_lesson_rate=-1)
