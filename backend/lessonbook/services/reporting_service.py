"""Reporting Service — loads lessons once and feeds the pure report functions.

Invariants:
    - Every report reads the same projection (core.reporting.LessonFact)
    - Admin lesson table: filters are case-insensitive substring matches, unknown
      sort keys fall back to date ascending, unknown filter keys are ignored
    - Filter dropdown values are computed AFTER filtering (what the admin can still narrow to)
"""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.core import reporting
from lessonbook.core.domain_types import LessonMode
from lessonbook.core.scheduling import slot_end
from lessonbook.models.lesson import Lesson
from lessonbook.models.student_profile import StudentProfile
from lessonbook.schemas.lessons import LessonResponse

logger = logging.getLogger(__name__)

CALENDAR_FORMAT = "%Y-%m-%dT%H:%M:%S"
VIRTUAL_COLOR = "#007bff"
IN_PERSON_COLOR = "#28a745"

SORT_KEYS = {
    "date": (lambda l: l.start_date_time, False),
    "date_desc": (lambda l: l.start_date_time, True),
    "teacher": (lambda l: l.teacher_name.lower(), False),
    "student": (lambda l: l.student_name.lower(), False),
    "instrument": (lambda l: l.instrument.lower(), False),
}
FILTER_FIELDS = {
    "teacher": lambda l: l.teacher_name,
    "student": lambda l: l.student_name,
    "instrument": lambda l: l.instrument,
}


def to_fact(lesson: Lesson) -> reporting.LessonFact:
    return reporting.LessonFact(
        lesson_id=lesson.id,
        teacher_id=lesson.teacher_id,
        teacher_name=lesson.teacher.name if lesson.teacher else "",
        student_id=lesson.student_id,
        student_name=lesson.student.name if lesson.student else "",
        instrument=lesson.instrument,
        start_date_time=lesson.start_date_time,
        price=lesson.price,
        status=lesson.status,
    )


def sort_and_filter(
    lessons: list[LessonResponse],
    sort_by: str = "date",
    filter_by: str = "",
    filter_value: str = "",
) -> list[LessonResponse]:
    field = FILTER_FIELDS.get(filter_by)
    if field is not None and filter_value:
        needle = filter_value.lower()
        lessons = [l for l in lessons if needle in field(l).lower()]
    key, reverse = SORT_KEYS.get(sort_by, SORT_KEYS["date"])
    return sorted(lessons, key=key, reverse=reverse)


class ReportingService:
    """Admin dashboard, lesson table, calendar and revenue reports."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _all_lessons(self) -> list[Lesson]:
        result = await self.db.execute(
            select(Lesson).order_by(Lesson.start_date_time),
        )
        return list(result.scalars().all())

    async def _facts(self) -> list[reporting.LessonFact]:
        return [to_fact(lesson) for lesson in await self._all_lessons()]

    async def _referral_counts(self) -> dict[str, int]:
        result = await self.db.execute(
            select(StudentProfile.referral_source, func.count())
            .group_by(StudentProfile.referral_source)
        )
        return {source: count for source, count in result.all()}

    async def dashboard(self) -> dict:
        facts = await self._facts()
        metrics = reporting.user_metrics(facts)
        logger.info(f"Admin dashboard computed over {len(facts)} lessons")
        return {
            "total_lessons": len(facts),
            "total_teachers": metrics["total_teachers"],
            "total_students": metrics["total_students"],
            "quarterly_revenue": reporting.quarterly_revenue(facts),
            "popular_instruments": reporting.popular_instruments(facts),
        }

    async def reports(self) -> dict:
        facts = await self._facts()
        return {
            "quarterly_revenue": reporting.quarterly_revenue(facts),
            "referral_breakdown": reporting.referral_breakdown(
                await self._referral_counts(),
            ),
            "popular_instruments": reporting.popular_instruments(facts),
            "user_metrics": reporting.user_metrics(facts),
            "repeat_booking_rate": reporting.repeat_booking_rate(facts),
        }

    async def user_metrics(self) -> dict:
        return reporting.user_metrics(await self._facts())

    async def repeat_booking_rate(self) -> dict:
        return reporting.repeat_booking_rate(await self._facts())

    async def revenue_distribution(self) -> dict:
        return reporting.revenue_distribution(await self._facts())

    async def lesson_table(
        self, sort_by: str = "date", filter_by: str = "", filter_value: str = "",
    ) -> dict:
        rows = [LessonResponse.from_model(l) for l in await self._all_lessons()]
        rows = sort_and_filter(rows, sort_by, filter_by, filter_value)
        return {
            "lessons": [row.model_dump(mode="json") for row in rows],
            "filters": {
                "teachers": sorted({row.teacher_name for row in rows}),
                "students": sorted({row.student_name for row in rows}),
                "instruments": sorted({row.instrument for row in rows}),
            },
            "pagination": {
                "current_sort": sort_by,
                "current_filter_by": filter_by,
                "current_filter_value": filter_value,
                "total_count": len(rows),
            },
        }

    async def calendar_events(
        self, start_date: datetime | None = None, end_date: datetime | None = None,
    ) -> list[dict]:
        lessons = await self._all_lessons()
        if start_date is not None:
            lessons = [l for l in lessons if l.start_date_time >= start_date]
        if end_date is not None:
            lessons = [l for l in lessons if l.start_date_time <= end_date]
        return [
            {
                "id": l.id,
                "title": f"{l.student.name} ({l.instrument} with {l.teacher.name})",
                "start": l.start_date_time.strftime(CALENDAR_FORMAT),
                "end": slot_end(l.start_date_time, l.duration).strftime(CALENDAR_FORMAT),
                "background_color": (
                    VIRTUAL_COLOR if l.mode == LessonMode.VIRTUAL.value
                    else IN_PERSON_COLOR
                ),
                "text_color": "white",
                "extended_props": {
                    "mode": l.mode,
                    "duration": l.duration,
                    "price": l.price,
                    "status": l.status,
                },
            }
            for l in lessons
        ]
