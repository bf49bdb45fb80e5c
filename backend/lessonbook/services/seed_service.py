"""Seed Service — dummy data generation for demos and the admin reports.

Invariants:
    - Generated emails never collide with existing accounts: numbering continues
      from the current teacher/student counts
    - Seed lesson price = round(duration / 60 * teacher rate, 2)
    - clear() removes lessons, slots, profiles and non-admin users; admins survive

Design Decisions:
    - random.Random injected: a fixed random_seed reproduces the same data set
    - One bcrypt hash reused for every generated account (hashing is the slow part)
"""

import logging
import random
from datetime import datetime, time, timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.core.domain_types import (
    LessonMode, LessonStatus, ReferralSource, UserRole, utcnow,
)
from lessonbook.core.pricing import price_for_duration
from lessonbook.infrastructure.passwords import hash_password_async
from lessonbook.models.availability import Availability
from lessonbook.models.lesson import Lesson
from lessonbook.models.student_profile import StudentProfile
from lessonbook.models.teacher_profile import TeacherProfile
from lessonbook.models.user import User

logger = logging.getLogger(__name__)

SEED_PASSWORD = "password"
SEED_EMAIL_DOMAIN = "lessonbook.com"
INSTRUMENTS = ["Piano", "Guitar", "Violin", "Drums", "Saxophone", "Flute"]
DURATIONS = [30, 45, 60]
FIRST_NAMES = [
    "Alex", "Jordan", "Sam", "Taylor", "Morgan", "Casey", "Riley", "Jamie",
    "Avery", "Quinn", "Harper", "Rowan", "Emery", "Skyler", "Reese", "Dakota",
]
LAST_NAMES = [
    "Smith", "Garcia", "Chen", "Okafor", "Novak", "Silva", "Kowalski", "Haddad",
    "Müller", "Tanaka", "Dubois", "Rossi", "Larsen", "Patel", "Moreau", "Kim",
]

# Lesson spread around "now": mostly history so reports have data
LESSON_DAYS_BACK = 120
LESSON_DAYS_AHEAD = 60


def _random_name(rng: random.Random) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def _at(day: datetime, hour: int, minute: int) -> datetime:
    return datetime.combine(day.date(), time(hour, minute))


def seed_status(rng: random.Random) -> LessonStatus:
    if rng.random() < 0.1:
        return LessonStatus.CANCELLED
    if rng.random() < 0.6:
        return LessonStatus.COMPLETED
    return LessonStatus.SCHEDULED


class SeedService:
    """Generate or clear demo data."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count_role(self, role: UserRole) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(User).where(User.role == role.value),
        )
        return result.scalar_one()

    async def generate(
        self,
        teachers: int = 5,
        students: int = 20,
        lessons: int = 120,
        rng: random.Random | None = None,
        now: datetime | None = None,
    ) -> dict:
        rng = rng or random.Random()
        now = now or utcnow()
        password_hash = await hash_password_async(SEED_PASSWORD)
        teacher_offset = await self._count_role(UserRole.TEACHER)
        student_offset = await self._count_role(UserRole.STUDENT)

        teacher_users: list[User] = []
        slots: list[Availability] = []
        for n in range(teacher_offset + 1, teacher_offset + teachers + 1):
            email = f"teacher{n}@{SEED_EMAIL_DOMAIN}"
            user = User(
                role=UserRole.TEACHER.value,
                name=_random_name(rng),
                email=email,
                password_hash=password_hash,
                contact_info=email,
            )
            user.teacher_profile = TeacherProfile(
                instrument_taught=rng.choice(INSTRUMENTS),
                bio="Experienced music teacher.",
                custom_lesson_rate=float(rng.randint(25, 45)),
            )
            teacher_users.append(user)
            for _ in range(rng.randint(3, 5)):
                day = now + timedelta(days=rng.randint(1, 30))
                slots.append(Availability(
                    teacher=user,
                    start_date_time=_at(day, rng.randint(9, 17), rng.choice([0, 30])),
                    duration=rng.choice(DURATIONS),
                ))

        student_users: list[User] = []
        sources = [source.value for source in ReferralSource]
        for n in range(student_offset + 1, student_offset + students + 1):
            email = f"student{n}@{SEED_EMAIL_DOMAIN}"
            user = User(
                role=UserRole.STUDENT.value,
                name=_random_name(rng),
                email=email,
                password_hash=password_hash,
                contact_info=email,
            )
            user.student_profile = StudentProfile(
                instrument_interest=rng.choice(INSTRUMENTS),
                referral_source=rng.choice(sources),
            )
            student_users.append(user)

        seeded_lessons: list[Lesson] = []
        if teacher_users and student_users:
            for _ in range(lessons):
                teacher = rng.choice(teacher_users)
                student = rng.choice(student_users)
                day = now + timedelta(
                    days=rng.randint(-LESSON_DAYS_BACK, LESSON_DAYS_AHEAD),
                )
                duration = rng.choice(DURATIONS)
                rate = teacher.teacher_profile.custom_lesson_rate
                seeded_lessons.append(Lesson(
                    teacher=teacher,
                    student=student,
                    instrument=teacher.teacher_profile.instruments[0],
                    start_date_time=_at(
                        day, rng.randint(9, 19), rng.choice([0, 15, 30, 45]),
                    ),
                    duration=duration,
                    mode=rng.choice([LessonMode.VIRTUAL, LessonMode.IN_PERSON]).value,
                    price=price_for_duration(duration, rate),
                    status=seed_status(rng).value,
                ))

        self.db.add_all([*teacher_users, *student_users, *slots, *seeded_lessons])
        await self.db.commit()
        summary = {
            "teachers_created": len(teacher_users),
            "students_created": len(student_users),
            "availabilities_created": len(slots),
            "lessons_created": len(seeded_lessons),
        }
        logger.info(f"Seed data generated: {summary}")
        return summary

    async def clear(self) -> dict:
        """Delete everything except admin accounts."""
        lessons = await self.db.execute(delete(Lesson))
        slots = await self.db.execute(delete(Availability))
        await self.db.execute(delete(TeacherProfile))
        await self.db.execute(delete(StudentProfile))
        users = await self.db.execute(
            delete(User).where(User.role != UserRole.ADMIN.value),
        )
        await self.db.commit()
        self.db.expunge_all()
        summary = {
            "lessons_deleted": lessons.rowcount,
            "availabilities_deleted": slots.rowcount,
            "users_deleted": users.rowcount,
        }
        logger.info(f"Seed data cleared: {summary}")
        return summary
