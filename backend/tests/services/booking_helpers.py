"""Shared helpers for route tests — account registration and slot creation."""

from datetime import timedelta

from lessonbook.core.domain_types import utcnow

PASSWORD = "secret123"


async def register(client, role, email, **extra):
    body = {
        "name": extra.pop("name", f"{role} {email.split('@')[0]}"),
        "email": email,
        "password": PASSWORD,
        "role": role,
        "instrument": extra.pop("instrument", "Piano"),
        **extra,
    }
    if role == "Student":
        body.setdefault("referral_source", "Friend")
    res = await client.post("/api/v1/auth/register", json=body)
    assert res.status_code == 201, res.text
    return res.json()["user"]


def future(days=3, hour=10, minute=0):
    """A naive UTC datetime in the future, at a fixed wall-clock time."""
    day = utcnow() + timedelta(days=days)
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


async def add_slot(client, teacher_id, start, duration=60):
    res = await client.post("/api/v1/teacher/availability", json={
        "teacher_id": teacher_id,
        "start_date_time": start.isoformat(),
        "duration": duration,
    })
    assert res.status_code == 201, res.text
    return res.json()["availability"]


async def book(client, availability_id, student_id, mode="Virtual", **extra):
    res = await client.post("/api/v1/student/book", json={
        "availability_id": availability_id,
        "student_id": student_id,
        "mode": mode,
        **extra,
    })
    assert res.status_code == 201, res.text
    return res.json()["lesson"]
