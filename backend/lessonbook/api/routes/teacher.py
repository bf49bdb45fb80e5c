"""Teacher Routes — dashboard, availability slots, lessons and profile.

Invariants:
    - Every mutation names the acting teacher (teacher_id) and is ownership-checked
      in the service layer
    - An unparseable date_filter is ignored, never an error
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.config import Settings, get_settings
from lessonbook.core.domain_types import LessonStatus
from lessonbook.infrastructure.database import get_db
from lessonbook.schemas.lessons import (
    AddAvailabilityRequest, AvailabilityResponse, LessonResponse,
)
from lessonbook.schemas.profiles import UpdateTeacherProfileRequest
from lessonbook.services.availability_service import AvailabilityService
from lessonbook.services.booking_service import BookingService
from lessonbook.services.profile_service import ProfileService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/teacher", tags=["teacher"])


def parse_date_filter(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.info(f"Ignoring unparseable date filter: {value!r}")
        return None


@router.get("/dashboard/{teacher_id}")
async def dashboard(
    teacher_id: int,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    profiles = ProfileService(db, settings)
    profile = await profiles.get_teacher_profile(teacher_id)
    upcoming = await BookingService(db, settings).upcoming_lessons(
        teacher_id=teacher_id,
    )
    return {
        "profile": profiles.teacher_view(profile),
        "upcoming_lessons": [LessonResponse.from_model(l) for l in upcoming],
    }


# ─── Availability ────────────────────────────────────────────────

@router.get("/availability/{teacher_id}", response_model=list[AvailabilityResponse])
async def list_availability(
    teacher_id: int,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await AvailabilityService(db, settings).list_for_teacher(teacher_id)


@router.post("/availability", status_code=status.HTTP_201_CREATED)
async def add_availability(
    body: AddAvailabilityRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Offer a new bookable slot (duration window, conflicts, then future start)."""
    availability = await AvailabilityService(db, settings).add(body)
    return {
        "success": True,
        "message": "Availability added.",
        "availability": AvailabilityResponse.model_validate(availability),
    }


@router.delete("/availability/{availability_id}")
async def remove_availability(
    availability_id: int,
    teacher_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    await AvailabilityService(db, settings).remove(availability_id, teacher_id)
    return {"success": True, "message": "Availability removed."}


# ─── Lessons ─────────────────────────────────────────────────────

@router.get("/lessons/{teacher_id}", response_model=list[LessonResponse])
async def list_lessons(
    teacher_id: int,
    date_filter: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    lessons = await BookingService(db, settings).lessons_for_teacher(
        teacher_id, parse_date_filter(date_filter),
    )
    return [LessonResponse.from_model(l) for l in lessons]


@router.delete("/lesson/{lesson_id}")
async def cancel_lesson(
    lesson_id: int,
    teacher_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    lesson = await BookingService(db, settings).change_status(
        lesson_id, LessonStatus.CANCELLED, teacher_id=teacher_id,
    )
    return {
        "success": True,
        "message": "Lesson cancelled.",
        "lesson": LessonResponse.from_model(lesson),
    }


@router.post("/lesson/{lesson_id}/complete")
async def complete_lesson(
    lesson_id: int,
    teacher_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    lesson = await BookingService(db, settings).change_status(
        lesson_id, LessonStatus.COMPLETED, teacher_id=teacher_id,
    )
    return {
        "success": True,
        "message": "Lesson marked as completed.",
        "lesson": LessonResponse.from_model(lesson),
    }


# ─── Profile ─────────────────────────────────────────────────────

@router.get("/profile/{user_id}")
async def get_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    profiles = ProfileService(db, settings)
    return profiles.teacher_view(await profiles.get_teacher_profile(user_id))


@router.put("/profile/{user_id}")
async def update_profile(
    user_id: int,
    body: UpdateTeacherProfileRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    profiles = ProfileService(db, settings)
    profile = await profiles.update_teacher_profile(user_id, body)
    return {
        "success": True,
        "message": "Profile updated.",
        "profile": profiles.teacher_view(profile),
    }
