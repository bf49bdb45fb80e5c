"""Booking Service — turns open slots into lessons and drives lesson status changes.

Invariants:
    - Booking consumes the slot: lesson insert + slot delete share ONE commit
    - A recurring series is all-or-nothing: every occurrence is conflict-checked against the
      teacher's non-cancelled lessons before anything is written
    - The teacher's other open slots that overlap an occurrence are consumed in the
      series commit, so nobody can book time the series already holds
    - A single booking is refused when its slot overlaps a non-cancelled lesson
    - Lesson price = teacher's effective rate at booking time
    - Lesson instrument must be one the teacher teaches (defaults to the first listed)
    - Status changes go through core.lesson_lifecycle.check_transition

Design Decisions:
    - Relationships assigned on construction (teacher=..., student=...): the returned lesson
      serializes without a lazy load after commit (ADR: async sessions cannot lazy-load)
    - Ownership enforced by filtering on teacher_id/student_id: another user's lesson is
      reported as not found, never as forbidden
"""

import logging
import uuid
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.config import Settings
from lessonbook.core.domain_types import LessonStatus, UserRole, utcnow
from lessonbook.core.errors import (
    BookingValidationError, ErrorContext, ResourceNotFoundError, TimeConflictError,
)
from lessonbook.core.lesson_lifecycle import check_transition
from lessonbook.core.scheduling import (
    covered_by_series, find_conflict, find_series_conflict, recurring_starts,
)
from lessonbook.models.availability import Availability
from lessonbook.models.lesson import Lesson
from lessonbook.models.teacher_profile import TeacherProfile
from lessonbook.models.user import User
from lessonbook.schemas.lessons import BookLessonRequest, BookRecurringRequest
from lessonbook.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


async def active_lessons_for_teacher(db: AsyncSession, teacher_id: int) -> list[Lesson]:
    """Lessons that still occupy the teacher's calendar."""
    result = await db.execute(
        select(Lesson)
        .where(Lesson.teacher_id == teacher_id)
        .where(Lesson.status != LessonStatus.CANCELLED.value)
    )
    return list(result.scalars().all())


async def other_open_slots(
    db: AsyncSession, teacher_id: int, exclude_id: int,
) -> list[Availability]:
    result = await db.execute(
        select(Availability)
        .where(Availability.teacher_id == teacher_id)
        .where(Availability.id != exclude_id)
    )
    return list(result.scalars().all())


def resolve_instrument(taught: list[str], requested: str | None) -> str:
    """Pick the lesson instrument from what the teacher teaches."""
    if not taught:
        raise BookingValidationError(
            "Teacher has no instruments listed.", "INSTRUMENT_NOT_TAUGHT",
        )
    if not requested or not requested.strip():
        return taught[0]
    for instrument in taught:
        if instrument.lower() == requested.strip().lower():
            return instrument
    raise BookingValidationError(
        f"This teacher does not teach {requested.strip()}.",
        "INSTRUMENT_NOT_TAUGHT",
    )


class BookingService:
    """Lesson booking, listing and status transitions."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.profiles = ProfileService(db, settings)

    # ─── Booking ─────────────────────────────────────────────────

    async def _load_booking_parties(
        self, availability_id: int, student_id: int,
    ) -> tuple[Availability, User, TeacherProfile]:
        availability = await self.db.get(Availability, availability_id)
        if availability is None:
            logger.warning(
                "Booking failed, slot not found",
                extra={"availability_id": availability_id},
            )
            raise ResourceNotFoundError(
                "Availability", availability_id, code="AVAILABILITY_NOT_FOUND",
            )
        student = await self.db.get(User, student_id)
        if student is None or student.role != UserRole.STUDENT.value:
            raise ResourceNotFoundError(
                "Student", student_id, code="STUDENT_NOT_FOUND",
            )
        profile = await self.profiles.find_teacher_profile(availability.teacher_id)
        if profile is None:
            logger.error(
                "Booking failed, slot owner has no teacher profile",
                extra={"teacher_id": availability.teacher_id},
            )
            raise ResourceNotFoundError(
                "Teacher profile", availability.teacher_id, code="TEACHER_NOT_FOUND",
            )
        return availability, student, profile

    async def book(self, request: BookLessonRequest) -> Lesson:
        availability, student, profile = await self._load_booking_parties(
            request.availability_id, request.student_id,
        )
        existing = await active_lessons_for_teacher(self.db, availability.teacher_id)
        clash = find_conflict(
            availability.start_date_time, availability.duration, existing,
        )
        if clash is not None:
            logger.warning(
                "Booking rejected, slot overlaps a booked lesson",
                extra={"availability_id": availability.id, "lesson_id": clash.id},
            )
            raise TimeConflictError(
                "This slot overlaps a lesson that is already booked.",
                code="SLOT_UNAVAILABLE",
            )
        lesson = Lesson(
            teacher=availability.teacher,
            student=student,
            instrument=resolve_instrument(profile.instruments, request.instrument),
            start_date_time=availability.start_date_time,
            duration=availability.duration,
            mode=request.mode.value,
            price=self.profiles.rate_for(profile),
            status=LessonStatus.SCHEDULED.value,
            sheet_music_path=request.sheet_music_path,
        )
        self.db.add(lesson)
        await self.db.delete(availability)
        await self.db.commit()
        logger.info(
            "Lesson booked",
            extra={
                "lesson_id": lesson.id,
                "student_id": student.id,
                "teacher_id": lesson.teacher_id,
                "availability_id": request.availability_id,
            },
        )
        return lesson

    async def book_recurring(
        self, request: BookRecurringRequest,
    ) -> tuple[uuid.UUID, list[Lesson]]:
        if request.occurrences > self.settings.max_recurring_occurrences:
            raise BookingValidationError(
                f"A series can have at most "
                f"{self.settings.max_recurring_occurrences} occurrences.",
                "INVALID_OCCURRENCES",
            )
        availability, student, profile = await self._load_booking_parties(
            request.availability_id, request.student_id,
        )
        starts = recurring_starts(
            availability.start_date_time, request.occurrences, request.interval_weeks,
        )
        existing = await active_lessons_for_teacher(self.db, availability.teacher_id)
        conflict_at = find_series_conflict(starts, availability.duration, existing)
        if conflict_at is not None:
            logger.warning(
                f"Recurring booking rejected, occurrence {conflict_at} conflicts",
                extra={
                    "teacher_id": availability.teacher_id,
                    "availability_id": availability.id,
                },
            )
            raise TimeConflictError(
                f"Conflict detected for occurrence {conflict_at}. "
                f"No lessons were booked.",
                code="RECURRING_CONFLICT",
            )

        series_id = uuid.uuid4()
        instrument = resolve_instrument(profile.instruments, request.instrument)
        price = self.profiles.rate_for(profile)
        lessons = [
            Lesson(
                teacher=availability.teacher,
                student=student,
                instrument=instrument,
                start_date_time=start,
                duration=availability.duration,
                mode=request.mode.value,
                price=price,
                status=LessonStatus.SCHEDULED.value,
                recurring_series_id=series_id,
            )
            for start in starts
        ]
        consumed = covered_by_series(
            starts,
            availability.duration,
            await other_open_slots(self.db, availability.teacher_id, availability.id),
        )
        self.db.add_all(lessons)
        await self.db.delete(availability)
        for slot in consumed:
            await self.db.delete(slot)
        await self.db.commit()
        logger.info(
            f"Recurring series booked with {len(lessons)} lessons",
            extra={
                "series_id": str(series_id),
                "student_id": student.id,
                "consumed_slots": len(consumed),
            },
        )
        return series_id, lessons

    # ─── Listing ─────────────────────────────────────────────────

    async def lessons_for_teacher(
        self, teacher_id: int, on_date: date | None = None,
    ) -> list[Lesson]:
        query = (
            select(Lesson)
            .where(Lesson.teacher_id == teacher_id)
            .order_by(Lesson.start_date_time)
        )
        if on_date is not None:
            day_start = datetime.combine(on_date, time.min)
            query = query.where(
                Lesson.start_date_time >= day_start,
                Lesson.start_date_time < day_start + timedelta(days=1),
            )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def lessons_for_student(
        self, student_id: int, status: LessonStatus | None = None,
    ) -> list[Lesson]:
        query = (
            select(Lesson)
            .where(Lesson.student_id == student_id)
            .order_by(Lesson.start_date_time)
        )
        if status is not None:
            query = query.where(Lesson.status == status.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def upcoming_lessons(
        self,
        *,
        teacher_id: int | None = None,
        student_id: int | None = None,
        now: datetime | None = None,
    ) -> list[Lesson]:
        """Next non-cancelled lessons after now, capped at upcoming_lessons_limit."""
        query = (
            select(Lesson)
            .where(Lesson.start_date_time > (now or utcnow()))
            .where(Lesson.status != LessonStatus.CANCELLED.value)
            .order_by(Lesson.start_date_time)
            .limit(self.settings.upcoming_lessons_limit)
        )
        if teacher_id is not None:
            query = query.where(Lesson.teacher_id == teacher_id)
        if student_id is not None:
            query = query.where(Lesson.student_id == student_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ─── Status & attachments ────────────────────────────────────

    async def _owned_lesson(
        self,
        lesson_id: int,
        *,
        teacher_id: int | None = None,
        student_id: int | None = None,
    ) -> Lesson:
        query = select(Lesson).where(Lesson.id == lesson_id)
        if teacher_id is not None:
            query = query.where(Lesson.teacher_id == teacher_id)
        if student_id is not None:
            query = query.where(Lesson.student_id == student_id)
        lesson = (await self.db.execute(query)).scalar_one_or_none()
        if lesson is None:
            logger.warning(
                "Lesson not found for owner",
                extra={
                    "lesson_id": lesson_id,
                    "teacher_id": teacher_id,
                    "student_id": student_id,
                },
            )
            raise ResourceNotFoundError(
                "Lesson", lesson_id, code="LESSON_NOT_FOUND",
                context=ErrorContext(lesson_id=lesson_id),
            )
        return lesson

    async def change_status(
        self,
        lesson_id: int,
        target: LessonStatus,
        *,
        teacher_id: int | None = None,
        student_id: int | None = None,
    ) -> Lesson:
        lesson = await self._owned_lesson(
            lesson_id, teacher_id=teacher_id, student_id=student_id,
        )
        lesson.status = check_transition(lesson.status, target).value
        await self.db.commit()
        logger.info(
            f"Lesson status set to {lesson.status}",
            extra={"lesson_id": lesson_id},
        )
        return lesson

    async def attach_sheet_music(
        self, lesson_id: int, student_id: int, sheet_music_path: str,
    ) -> Lesson:
        lesson = await self._owned_lesson(lesson_id, student_id=student_id)
        lesson.sheet_music_path = sheet_music_path
        await self.db.commit()
        logger.info("Sheet music attached", extra={"lesson_id": lesson_id})
        return lesson
