"""Auth Service — registration, credential checks and the bootstrap admin account.

Invariants:
    - One account per email (checked up front, enforced by the unique index)
    - Teachers get a TeacherProfile with no custom rate; students get a StudentProfile;
      admins get no profile
    - authenticate() raises the same InvalidCredentialsError for unknown email and
      wrong password

Design Decisions:
    - User and profile inserted in one commit: a half-registered account never exists
    - IntegrityError on commit re-checked as EMAIL_EXISTS: covers two registrations racing
      past the up-front check
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.config import Settings
from lessonbook.core.domain_types import UserRole
from lessonbook.core.errors import (
    EmailAlreadyRegisteredError, InvalidCredentialsError,
)
from lessonbook.infrastructure.passwords import (
    hash_password_async, verify_password_async,
)
from lessonbook.models.student_profile import StudentProfile
from lessonbook.models.teacher_profile import TeacherProfile
from lessonbook.models.user import User
from lessonbook.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


class AuthService:
    """Account creation and login."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, request: RegisterRequest) -> User:
        logger.info(f"Registration attempt for {request.email} as {request.role.value}")
        if await get_user_by_email(self.db, request.email) is not None:
            logger.warning(f"Registration rejected, email exists: {request.email}")
            raise EmailAlreadyRegisteredError()

        user = User(
            role=request.role.value,
            name=request.name,
            email=request.email,
            password_hash=await hash_password_async(request.password),
            contact_info=request.contact_info,
        )
        if request.role == UserRole.TEACHER:
            user.teacher_profile = TeacherProfile(
                instrument_taught=request.instrument,
                bio=request.bio,
                custom_lesson_rate=None,
            )
        elif request.role == UserRole.STUDENT:
            user.student_profile = StudentProfile(
                instrument_interest=request.instrument,
                referral_source=request.referral_source.strip(),
            )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Registration lost race for email: {request.email}")
            raise EmailAlreadyRegisteredError()

        logger.info(
            f"Registered {request.role.value} account",
            extra={"user_id": user.id},
        )
        return user

    async def authenticate(self, email: str, password: str) -> User:
        user = await get_user_by_email(self.db, email)
        if user is None:
            logger.warning(f"Login failed, unknown email: {email}")
            raise InvalidCredentialsError()
        if not await verify_password_async(password, user.password_hash):
            logger.warning(
                "Login failed, wrong password", extra={"user_id": user.id},
            )
            raise InvalidCredentialsError()
        logger.info("Login successful", extra={"user_id": user.id})
        return user


async def ensure_default_admin(db: AsyncSession, settings: Settings) -> bool:
    """Create the configured admin account if missing. Returns True when created."""
    if await get_user_by_email(db, settings.admin_email) is not None:
        return False
    db.add(User(
        role=UserRole.ADMIN.value,
        name=settings.admin_name,
        email=settings.admin_email.lower(),
        password_hash=await hash_password_async(settings.admin_password),
        contact_info=settings.admin_email.lower(),
    ))
    await db.commit()
    logger.info(f"Default admin account created: {settings.admin_email}")
    return True
