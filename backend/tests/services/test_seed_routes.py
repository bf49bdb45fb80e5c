"""Seed routes — demo data generation and clearing.

Invariants:
    - A fixed random_seed yields the requested counts
    - Seed prices follow round(duration / 60 * rate, 2)
    - clear keeps admin accounts and removes everything else
"""

from sqlalchemy import func, select

from lessonbook.config import Settings
from lessonbook.core.pricing import price_for_duration
from lessonbook.models.availability import Availability
from lessonbook.models.lesson import Lesson
from lessonbook.models.user import User
from lessonbook.services.auth_service import ensure_default_admin


async def _count(db, model, *where):
    query = select(func.count()).select_from(model)
    for clause in where:
        query = query.where(clause)
    return (await db.execute(query)).scalar_one()


async def test_seed_creates_requested_counts(client, test_db):
    res = await client.post("/api/v1/admin/seed", params={
        "teachers": 2, "students": 3, "lessons": 10, "random_seed": 7,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["teachers_created"] == 2
    assert body["students_created"] == 3
    assert body["lessons_created"] == 10
    assert 6 <= body["availabilities_created"] <= 10

    assert await _count(test_db, User, User.role == "Teacher") == 2
    assert await _count(test_db, Lesson) == 10


async def test_seed_prices_scale_with_duration(client, test_db):
    await client.post("/api/v1/admin/dummy-data", params={
        "teachers": 1, "students": 2, "lessons": 8, "random_seed": 1,
    })
    lessons = (await test_db.execute(select(Lesson))).scalars().all()
    rate = lessons[0].teacher.teacher_profile.custom_lesson_rate
    assert 25 <= rate <= 45
    for lesson in lessons:
        assert lesson.price == price_for_duration(lesson.duration, rate)
        assert lesson.duration in (30, 45, 60)


async def test_seed_numbering_continues(client, test_db):
    await client.post("/api/v1/admin/seed", params={
        "teachers": 1, "students": 1, "lessons": 0, "random_seed": 2,
    })
    res = await client.post("/api/v1/admin/seed", params={
        "teachers": 1, "students": 1, "lessons": 0, "random_seed": 3,
    })
    assert res.status_code == 200
    emails = set((await test_db.execute(select(User.email))).scalars().all())
    assert {"teacher1@lessonbook.com", "teacher2@lessonbook.com"} <= emails


async def test_seeded_account_can_log_in(client):
    await client.post("/api/v1/admin/seed", params={
        "teachers": 1, "students": 0, "lessons": 0, "random_seed": 4,
    })
    res = await client.post("/api/v1/auth/login", json={
        "email": "teacher1@lessonbook.com", "password": "password",
    })
    assert res.status_code == 200


async def test_clear_keeps_admin(client, test_db):
    await ensure_default_admin(test_db, Settings())
    await client.post("/api/v1/admin/seed", params={
        "teachers": 2, "students": 2, "lessons": 5, "random_seed": 5,
    })

    res = await client.post("/api/v1/admin/seed", params={"clear": True})
    assert res.status_code == 200
    assert res.json()["lessons_deleted"] == 5

    assert await _count(test_db, Lesson) == 0
    assert await _count(test_db, Availability) == 0
    assert await _count(test_db, User) == 1
    admin = (await test_db.execute(select(User))).scalar_one()
    assert admin.role == "Admin"


async def test_default_admin_created_once(test_db):
    settings = Settings()
    assert await ensure_default_admin(test_db, settings) is True
    assert await ensure_default_admin(test_db, settings) is False
