"""Availability Service — teacher slot management and open-slot browsing.

Invariants:
    - New slots pass core.scheduling.validate_new_availability against BOTH the teacher's
      open slots and the teacher's non-cancelled lessons
    - Slots are only removable by their own teacher
    - Grouped listings order teachers by name and slots by start time

Design Decisions:
    - Conflict candidates loaded per teacher and checked in Python: a teacher has a
      handful of rows, and the pure check is unit-tested without a DB
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.config import Settings
from lessonbook.core.domain_types import UserRole, utcnow
from lessonbook.core.errors import LessonBookError, ResourceNotFoundError
from lessonbook.core.scheduling import slot_end, validate_new_availability
from lessonbook.models.availability import Availability
from lessonbook.models.teacher_profile import TeacherProfile
from lessonbook.models.user import User
from lessonbook.schemas.lessons import AddAvailabilityRequest, AvailabilityResponse
from lessonbook.services.booking_service import active_lessons_for_teacher

logger = logging.getLogger(__name__)

CALENDAR_FORMAT = "%Y-%m-%dT%H:%M:%S"
AVAILABLE_COLOR = "#ffc107"


class AvailabilityService:
    """Create, remove and browse open availability slots."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    async def list_for_teacher(self, teacher_id: int) -> list[Availability]:
        result = await self.db.execute(
            select(Availability)
            .where(Availability.teacher_id == teacher_id)
            .order_by(Availability.start_date_time)
        )
        return list(result.scalars().all())

    async def add(
        self, request: AddAvailabilityRequest, now: datetime | None = None,
    ) -> Availability:
        teacher = await self.db.get(User, request.teacher_id)
        if teacher is None or teacher.role != UserRole.TEACHER.value:
            raise ResourceNotFoundError(
                "Teacher", request.teacher_id, code="TEACHER_NOT_FOUND",
            )

        existing = [
            *await self.list_for_teacher(request.teacher_id),
            *await active_lessons_for_teacher(self.db, request.teacher_id),
        ]
        try:
            validate_new_availability(
                request.start_date_time,
                request.duration,
                existing,
                now or utcnow(),
                min_duration=self.settings.min_availability_minutes,
                max_duration=self.settings.max_availability_minutes,
            )
        except LessonBookError as e:
            logger.warning(
                f"Availability rejected: {e.message}",
                extra={"teacher_id": request.teacher_id, "error_code": e.code},
            )
            raise

        availability = Availability(
            teacher_id=request.teacher_id,
            start_date_time=request.start_date_time,
            duration=request.duration,
        )
        self.db.add(availability)
        await self.db.commit()
        logger.info(
            "Availability added",
            extra={
                "teacher_id": request.teacher_id,
                "availability_id": availability.id,
            },
        )
        return availability

    async def remove(self, availability_id: int, teacher_id: int) -> None:
        result = await self.db.execute(
            select(Availability)
            .where(Availability.id == availability_id)
            .where(Availability.teacher_id == teacher_id)
        )
        availability = result.scalar_one_or_none()
        if availability is None:
            raise ResourceNotFoundError(
                "Availability", availability_id, code="AVAILABILITY_NOT_FOUND",
            )
        await self.db.delete(availability)
        await self.db.commit()
        logger.info(
            "Availability removed",
            extra={"teacher_id": teacher_id, "availability_id": availability_id},
        )

    async def grouped_open_slots(
        self, teacher_id: int | None = None, instrument: str | None = None,
    ) -> list[dict]:
        """Open slots grouped per teacher, optionally narrowed by teacher or instrument."""
        query = (
            select(Availability, TeacherProfile)
            .join(TeacherProfile, TeacherProfile.user_id == Availability.teacher_id, isouter=True)
            .order_by(Availability.start_date_time)
        )
        if teacher_id is not None:
            query = query.where(Availability.teacher_id == teacher_id)
        rows = (await self.db.execute(query)).all()

        wanted = instrument.strip().lower() if instrument else None
        groups: dict[int, dict] = {}
        for availability, profile in rows:
            instruments = profile.instruments if profile else []
            if wanted is not None and wanted not in (i.lower() for i in instruments):
                continue
            group = groups.get(availability.teacher_id)
            if group is None:
                group = groups[availability.teacher_id] = {
                    "teacher": {
                        "user_id": availability.teacher.id,
                        "name": availability.teacher.name,
                        "email": availability.teacher.email,
                        "instruments": instruments,
                    },
                    "availabilities": [],
                }
            group["availabilities"].append(
                AvailabilityResponse.model_validate(availability).model_dump(mode="json"),
            )
        return sorted(groups.values(), key=lambda g: g["teacher"]["name"])

    async def calendar_events(
        self,
        teacher_id: int,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[dict]:
        slots = await self.list_for_teacher(teacher_id)
        if start_date is not None:
            slots = [a for a in slots if a.start_date_time >= start_date]
        if end_date is not None:
            slots = [a for a in slots if a.start_date_time <= end_date]
        return [
            {
                "id": a.id,
                "title": f"Available - {a.duration}min",
                "start": a.start_date_time.strftime(CALENDAR_FORMAT),
                "end": slot_end(a.start_date_time, a.duration).strftime(CALENDAR_FORMAT),
                "background_color": AVAILABLE_COLOR,
                "text_color": "black",
                "extended_props": {
                    "availability_id": a.id,
                    "duration": a.duration,
                    "teacher_id": a.teacher_id,
                },
            }
            for a in slots
        ]
