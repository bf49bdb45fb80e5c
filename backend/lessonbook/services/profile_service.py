"""Profile Service — teacher and student profile lookups, edits and effective rates.

Invariants:
    - Profiles are looked up by the owning user's id (the id the frontend knows)
    - effective rate = custom_lesson_rate or settings.default_lesson_rate
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.config import Settings
from lessonbook.core.domain_types import join_instruments
from lessonbook.core.errors import ResourceNotFoundError
from lessonbook.core.pricing import effective_rate
from lessonbook.models.student_profile import StudentProfile
from lessonbook.models.teacher_profile import TeacherProfile
from lessonbook.schemas.profiles import (
    StudentProfileResponse, TeacherProfileResponse, UpdateTeacherProfileRequest,
)

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile reads and teacher profile updates."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    async def find_teacher_profile(self, user_id: int) -> TeacherProfile | None:
        result = await self.db.execute(
            select(TeacherProfile).where(TeacherProfile.user_id == user_id),
        )
        return result.scalar_one_or_none()

    async def get_teacher_profile(self, user_id: int) -> TeacherProfile:
        profile = await self.find_teacher_profile(user_id)
        if profile is None:
            raise ResourceNotFoundError(
                "Teacher profile", user_id, code="PROFILE_NOT_FOUND",
            )
        return profile

    async def get_student_profile(self, user_id: int) -> StudentProfile:
        result = await self.db.execute(
            select(StudentProfile).where(StudentProfile.user_id == user_id),
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise ResourceNotFoundError(
                "Student profile", user_id, code="PROFILE_NOT_FOUND",
            )
        return profile

    def rate_for(self, profile: TeacherProfile) -> float:
        return effective_rate(
            profile.custom_lesson_rate, self.settings.default_lesson_rate,
        )

    def teacher_view(self, profile: TeacherProfile) -> TeacherProfileResponse:
        return TeacherProfileResponse(
            id=profile.id,
            user_id=profile.user_id,
            name=profile.user.name,
            email=profile.user.email,
            instruments=profile.instruments,
            bio=profile.bio,
            custom_lesson_rate=profile.custom_lesson_rate,
            effective_rate=self.rate_for(profile),
        )

    @staticmethod
    def student_view(profile: StudentProfile) -> StudentProfileResponse:
        return StudentProfileResponse(
            id=profile.id,
            user_id=profile.user_id,
            name=profile.user.name,
            email=profile.user.email,
            instrument_interest=profile.instrument_interest,
            referral_source=profile.referral_source,
        )

    async def update_teacher_profile(
        self, user_id: int, request: UpdateTeacherProfileRequest,
    ) -> TeacherProfile:
        profile = await self.get_teacher_profile(user_id)
        if request.instruments_taught:
            profile.instrument_taught = join_instruments(request.instruments_taught)
        elif request.instrument_taught and request.instrument_taught.strip():
            profile.instrument_taught = request.instrument_taught.strip()
        profile.bio = request.bio
        profile.custom_lesson_rate = request.custom_lesson_rate
        await self.db.commit()
        logger.info("Teacher profile updated", extra={"teacher_id": user_id})
        return profile
