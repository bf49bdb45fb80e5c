"""Admin routes — dashboard, lesson table, reports, calendar and revenue distribution.

Invariants:
    - Revenue reports ignore cancelled lessons; activity counts include them
    - Lesson table filters are case-insensitive substrings; unknown sorts fall back to date
"""

from datetime import datetime

import pytest

from lessonbook.models.lesson import Lesson
from lessonbook.models.student_profile import StudentProfile
from lessonbook.models.teacher_profile import TeacherProfile
from lessonbook.models.user import User


def _user(role, name, email):
    return User(role=role, name=name, email=email, password_hash="x")


@pytest.fixture
async def history(test_db):
    """Two teachers, three students, five lessons across two quarters."""
    piano = _user("Teacher", "Paula Piano", "paula@example.com")
    piano.teacher_profile = TeacherProfile(instrument_taught="Piano")
    guitar = _user("Teacher", "Gus Guitar", "gus@example.com")
    guitar.teacher_profile = TeacherProfile(instrument_taught="Guitar")

    students = []
    for name, source in [("Ann", "Friend"), ("Bob", "Search"), ("Cy", "Friend")]:
        s = _user("Student", name, f"{name.lower()}@example.com")
        s.student_profile = StudentProfile(instrument_interest="Piano", referral_source=source)
        students.append(s)
    ann, bob, cy = students

    def lesson(teacher, student, instrument, when, price, status="Completed", mode="Virtual"):
        return Lesson(
            teacher=teacher, student=student, instrument=instrument,
            start_date_time=when, duration=60, mode=mode, price=price, status=status,
        )

    test_db.add_all([piano, guitar, *students])
    test_db.add_all([
        lesson(piano, ann, "Piano", datetime(2026, 1, 10, 10), 40.0),
        lesson(piano, ann, "Piano", datetime(2026, 2, 10, 10), 40.0, mode="In-Person"),
        lesson(guitar, bob, "Guitar", datetime(2026, 4, 5, 9), 30.0),
        lesson(guitar, cy, "Guitar", datetime(2026, 4, 6, 9), 30.0, status="Cancelled"),
        lesson(piano, bob, "Piano", datetime(2026, 5, 1, 15), 20.0, status="Scheduled"),
    ])
    await test_db.commit()


async def test_dashboard(client, history):
    body = (await client.get("/api/v1/admin/dashboard")).json()
    assert body["total_lessons"] == 5
    assert body["total_teachers"] == 2
    assert body["total_students"] == 3
    assert body["quarterly_revenue"] == [
        {"quarter": "2026 Q1", "revenue": 80.0, "lesson_count": 2},
        {"quarter": "2026 Q2", "revenue": 50.0, "lesson_count": 2},
    ]
    assert body["popular_instruments"] == [
        {"instrument": "Piano", "count": 3},
        {"instrument": "Guitar", "count": 2},
    ]


async def test_dashboard_empty(client):
    body = (await client.get("/api/v1/admin/dashboard")).json()
    assert body["total_lessons"] == 0
    assert body["quarterly_revenue"] == []


async def test_lesson_table_default_sort_by_date(client, history):
    body = (await client.get("/api/v1/admin/lessons")).json()
    starts = [l["start_date_time"] for l in body["lessons"]]
    assert starts == sorted(starts)
    assert body["pagination"] == {
        "current_sort": "date", "current_filter_by": "",
        "current_filter_value": "", "total_count": 5,
    }
    assert body["filters"]["teachers"] == ["Gus Guitar", "Paula Piano"]


async def test_lesson_table_filter_and_sort(client, history):
    body = (await client.get("/api/v1/admin/lessons", params={
        "sort_by": "date_desc", "filter_by": "teacher", "filter_value": "PAULA",
    })).json()
    assert body["pagination"]["total_count"] == 3
    assert {l["teacher_name"] for l in body["lessons"]} == {"Paula Piano"}
    starts = [l["start_date_time"] for l in body["lessons"]]
    assert starts == sorted(starts, reverse=True)
    assert body["filters"]["students"] == ["Ann", "Bob"]


async def test_lesson_table_sort_by_student(client, history):
    body = (await client.get("/api/v1/admin/lessons", params={"sort_by": "student"})).json()
    names = [l["student_name"] for l in body["lessons"]]
    assert names == sorted(names)


async def test_lesson_table_unknown_sort_falls_back_to_date(client, history):
    body = (await client.get("/api/v1/admin/lessons", params={"sort_by": "price"})).json()
    starts = [l["start_date_time"] for l in body["lessons"]]
    assert starts == sorted(starts)


async def test_reports(client, history):
    body = (await client.get("/api/v1/admin/reports")).json()
    assert body["referral_breakdown"] == [
        {"referral_source": "Friend", "count": 2, "percentage": 66.67},
        {"referral_source": "Search", "count": 1, "percentage": 33.33},
    ]
    assert body["user_metrics"]["total_users"] == 5
    assert body["repeat_booking_rate"]["students_with_multiple_lessons"] == 2


async def test_repeat_booking_rate(client, history):
    body = (await client.get("/api/v1/admin/repeat-booking-rate")).json()
    assert body == {
        "total_students_with_lessons": 3,
        "students_with_multiple_lessons": 2,
        "repeat_rate": 66.67,
    }


async def test_user_metrics(client, history):
    body = (await client.get("/api/v1/admin/user-metrics")).json()
    assert body == {"total_teachers": 2, "total_students": 3, "total_users": 5}


async def test_calendar_events_colors_and_range(client, history):
    events = (await client.get("/api/v1/admin/calendar-events", params={
        "start_date": "2026-01-01T00:00:00", "end_date": "2026-02-28T00:00:00",
    })).json()
    assert len(events) == 2
    virtual, in_person = events
    assert virtual["title"] == "Ann (Piano with Paula Piano)"
    assert virtual["background_color"] == "#007bff"
    assert in_person["background_color"] == "#28a745"
    assert virtual["start"] == "2026-01-10T10:00:00"
    assert virtual["end"] == "2026-01-10T11:00:00"


async def test_revenue_distribution(client, history):
    body = (await client.get("/api/v1/admin/revenue-distribution")).json()
    assert body["total_revenue"] == 130.0
    instruments = body["instrument_distribution"]
    assert instruments["instruments_for_50_percent"] == ["Piano"]
    assert instruments["instruments_revenue"] == 100.0
    students = body["student_distribution"]
    assert [s["student_name"] for s in students["students"]] == ["Ann", "Bob"]
    assert students["students_for_50_percent"] == ["Ann"]
