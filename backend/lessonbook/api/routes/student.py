"""Student Routes — browsing open slots, booking, payment checks and sheet music.

Invariants:
    - Booking (single or recurring) is one transaction in the service layer
    - Payment validation always answers 200; success=false carries the reason
    - Uploaded sheet music is served back under /uploads
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.config import Settings, get_settings
from lessonbook.core.domain_types import LessonStatus, to_naive_utc, utcnow
from lessonbook.core.payment import FAILURE_MESSAGES, SUCCESS_MESSAGE, validate_card
from lessonbook.infrastructure.database import get_db
from lessonbook.infrastructure.file_storage import (
    allowed_extension, read_capped, save_sheet_music_async,
)
from lessonbook.schemas.lessons import (
    AttachSheetMusicRequest, BookLessonRequest, BookRecurringRequest, LessonResponse,
)
from lessonbook.schemas.payment import PaymentRequest, PaymentValidationResponse
from lessonbook.services.availability_service import AvailabilityService
from lessonbook.services.booking_service import BookingService
from lessonbook.services.profile_service import ProfileService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/student", tags=["student"])


@router.get("/dashboard/{student_id}")
async def dashboard(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    profile = await ProfileService(db, settings).get_student_profile(student_id)
    upcoming = await BookingService(db, settings).upcoming_lessons(
        student_id=student_id,
    )
    return {
        "profile": ProfileService.student_view(profile),
        "upcoming_lessons": [LessonResponse.from_model(l) for l in upcoming],
    }


# ─── Browsing ────────────────────────────────────────────────────

@router.get("/availabilities")
async def availabilities(
    teacher_id: int | None = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await AvailabilityService(db, settings).grouped_open_slots(
        teacher_id=teacher_id,
    )


@router.get("/search")
async def search(
    instrument: str = Query(..., min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await AvailabilityService(db, settings).grouped_open_slots(
        instrument=instrument,
    )


@router.get("/calendar/{teacher_id}")
async def calendar(
    teacher_id: int,
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await AvailabilityService(db, settings).calendar_events(
        teacher_id,
        to_naive_utc(start_date) if start_date else None,
        to_naive_utc(end_date) if end_date else None,
    )


# ─── Booking ─────────────────────────────────────────────────────

@router.post("/book", status_code=status.HTTP_201_CREATED)
async def book(
    body: BookLessonRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    lesson = await BookingService(db, settings).book(body)
    return {
        "success": True,
        "message": "Lesson booked successfully!",
        "lesson": LessonResponse.from_model(lesson),
    }


@router.post("/book-recurring", status_code=status.HTTP_201_CREATED)
async def book_recurring(
    body: BookRecurringRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Book a weekly series from one slot; all occurrences or none."""
    series_id, lessons = await BookingService(db, settings).book_recurring(body)
    return {
        "success": True,
        "message": f"Successfully booked {len(lessons)} recurring lessons!",
        "recurring_series_id": str(series_id),
        "lessons": [LessonResponse.from_model(l) for l in lessons],
    }


@router.post("/validate-payment", response_model=PaymentValidationResponse)
async def validate_payment(body: PaymentRequest):
    reason = validate_card(
        body.card_number, body.expiry_date, body.cvv, utcnow().date(),
    )
    if reason is not None:
        logger.info(f"Payment details rejected: {reason}")
        return PaymentValidationResponse(
            success=False, message=FAILURE_MESSAGES[reason], reason=reason,
        )
    return PaymentValidationResponse(success=True, message=SUCCESS_MESSAGE)


# ─── Lessons ─────────────────────────────────────────────────────

@router.get("/lessons/{student_id}", response_model=list[LessonResponse])
async def list_lessons(
    student_id: int,
    lesson_status: LessonStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    lessons = await BookingService(db, settings).lessons_for_student(
        student_id, lesson_status,
    )
    return [LessonResponse.from_model(l) for l in lessons]


@router.delete("/lesson/{lesson_id}")
async def cancel_lesson(
    lesson_id: int,
    student_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    lesson = await BookingService(db, settings).change_status(
        lesson_id, LessonStatus.CANCELLED, student_id=student_id,
    )
    return {
        "success": True,
        "message": "Lesson cancelled.",
        "lesson": LessonResponse.from_model(lesson),
    }


# ─── Sheet music ─────────────────────────────────────────────────

@router.post("/sheet-music", status_code=status.HTTP_201_CREATED)
async def upload_sheet_music(
    file: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
):
    if file is None:
        content, filename = b"", ""
    else:
        allowed_extension(file.filename or "")
        content = await read_capped(file, settings.max_upload_bytes)
        filename = file.filename or ""
    file_path = await save_sheet_music_async(settings.uploads_dir, filename, content)
    return {
        "success": True,
        "message": "Sheet music uploaded.",
        "file_path": file_path,
    }


@router.put("/lesson/{lesson_id}/sheet-music")
async def attach_sheet_music(
    lesson_id: int,
    body: AttachSheetMusicRequest,
    student_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    lesson = await BookingService(db, settings).attach_sheet_music(
        lesson_id, student_id, body.sheet_music_path,
    )
    return {
        "success": True,
        "message": "Sheet music attached.",
        "lesson": LessonResponse.from_model(lesson),
    }
