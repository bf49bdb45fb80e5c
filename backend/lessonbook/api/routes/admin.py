"""Admin Routes — dashboard, lesson table, reports and demo data.

Invariants:
    - Read-only except the seed endpoints
    - /seed and /dummy-data are the same operation under two paths
"""

import logging
import random
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.core.domain_types import to_naive_utc
from lessonbook.infrastructure.database import get_db
from lessonbook.services.reporting_service import ReportingService
from lessonbook.services.seed_service import SeedService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/dashboard")
async def dashboard(db: AsyncSession = Depends(get_db)):
    return await ReportingService(db).dashboard()


@router.get("/lessons")
async def lessons(
    sort_by: str = Query("date", max_length=20),
    filter_by: str = Query("", max_length=20),
    filter_value: str = Query("", max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """All lessons, sorted and optionally filtered by teacher, student or instrument."""
    return await ReportingService(db).lesson_table(sort_by, filter_by, filter_value)


@router.get("/reports")
async def reports(db: AsyncSession = Depends(get_db)):
    return await ReportingService(db).reports()


@router.get("/user-metrics")
async def user_metrics(db: AsyncSession = Depends(get_db)):
    return await ReportingService(db).user_metrics()


@router.get("/repeat-booking-rate")
async def repeat_booking_rate(db: AsyncSession = Depends(get_db)):
    return await ReportingService(db).repeat_booking_rate()


@router.get("/calendar-events")
async def calendar_events(
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await ReportingService(db).calendar_events(
        to_naive_utc(start_date) if start_date else None,
        to_naive_utc(end_date) if end_date else None,
    )


@router.get("/revenue-distribution")
async def revenue_distribution(db: AsyncSession = Depends(get_db)):
    return await ReportingService(db).revenue_distribution()


# ─── Demo data ───────────────────────────────────────────────────

@router.post("/seed")
@router.post("/dummy-data")
async def seed(
    teachers: int = Query(5, ge=0, le=100),
    students: int = Query(20, ge=0, le=500),
    lessons: int = Query(120, ge=0, le=5000),
    clear: bool = Query(False),
    random_seed: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Generate demo data, or wipe everything but admins when clear=true."""
    service = SeedService(db)
    if clear:
        return {
            "success": True,
            "message": "All data cleared except admin accounts.",
            **await service.clear(),
        }
    summary = await service.generate(
        teachers, students, lessons, rng=random.Random(random_seed),
    )
    return {
        "success": True,
        "message": (
            f"Created {summary['teachers_created']} teachers, "
            f"{summary['students_created']} students and "
            f"{summary['lessons_created']} lessons."
        ),
        **summary,
    }
