"""Lesson & Availability Schemas — booking requests and the shapes returned for rows.

Invariants:
    - Availability duration is bounded [1, 480] here; the bookable window (15-480 by
      default) is a service rule so it can be configured
    - Recurring bookings: 1-52 occurrences, 1-12 weeks apart
    - Incoming datetimes normalized to naive UTC
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lessonbook.core.domain_types import LessonMode, LessonStatus, to_naive_utc
from lessonbook.core.scheduling import ENTITY_MAX_DURATION, ENTITY_MIN_DURATION


class AddAvailabilityRequest(BaseModel):
    teacher_id: int = Field(ge=1)
    start_date_time: datetime
    duration: int = Field(ge=ENTITY_MIN_DURATION, le=ENTITY_MAX_DURATION)

    @field_validator("start_date_time")
    @classmethod
    def normalize_start(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class BookLessonRequest(BaseModel):
    availability_id: int = Field(ge=1)
    student_id: int = Field(ge=1)
    mode: LessonMode
    instrument: str | None = Field(None, max_length=100)
    sheet_music_path: str | None = Field(None, max_length=500)


class BookRecurringRequest(BaseModel):
    availability_id: int = Field(ge=1)
    student_id: int = Field(ge=1)
    mode: LessonMode
    occurrences: int = Field(ge=1, le=52)
    interval_weeks: int = Field(1, ge=1, le=12)
    instrument: str | None = Field(None, max_length=100)


class AttachSheetMusicRequest(BaseModel):
    sheet_music_path: str = Field(min_length=1, max_length=500)


class AvailabilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    teacher_id: int
    start_date_time: datetime
    duration: int


class LessonResponse(BaseModel):
    """A lesson with both participants' names resolved."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    teacher_id: int
    teacher_name: str
    student_id: int
    student_name: str
    instrument: str
    start_date_time: datetime
    duration: int
    mode: LessonMode
    price: float
    status: LessonStatus
    recurring_series_id: UUID | None = None
    sheet_music_path: str | None = None

    @classmethod
    def from_model(cls, lesson) -> "LessonResponse":
        return cls(
            id=lesson.id,
            teacher_id=lesson.teacher_id,
            teacher_name=lesson.teacher.name if lesson.teacher else "",
            student_id=lesson.student_id,
            student_name=lesson.student.name if lesson.student else "",
            instrument=lesson.instrument,
            start_date_time=lesson.start_date_time,
            duration=lesson.duration,
            mode=lesson.mode,
            price=lesson.price,
            status=lesson.status,
            recurring_series_id=lesson.recurring_series_id,
            sheet_music_path=lesson.sheet_music_path,
        )
