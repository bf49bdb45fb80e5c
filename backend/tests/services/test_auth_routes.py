"""Auth routes — registration, login, logout and the error envelope.

Invariants:
    - Registration creates the profile matching the role
    - Duplicate email → 409 EMAIL_EXISTS
    - Unknown email and wrong password both → 401 INVALID_CREDENTIALS
    - Schema failures → 400 VALIDATION_ERROR
"""

from sqlalchemy import select

from lessonbook.models.student_profile import StudentProfile
from lessonbook.models.teacher_profile import TeacherProfile
from lessonbook.models.user import User
from tests.services.booking_helpers import PASSWORD, register


async def test_register_teacher_creates_profile(client, test_db):
    user = await register(client, "Teacher", "t@example.com", instrument="Violin")
    assert user["role"] == "Teacher"

    profile = (await test_db.execute(
        select(TeacherProfile).where(TeacherProfile.user_id == user["id"]),
    )).scalar_one()
    assert profile.instrument_taught == "Violin"
    assert profile.custom_lesson_rate is None


async def test_register_student_creates_profile(client, test_db):
    user = await register(
        client, "Student", "s@example.com", referral_source="Flyer",
    )
    profile = (await test_db.execute(
        select(StudentProfile).where(StudentProfile.user_id == user["id"]),
    )).scalar_one()
    assert profile.referral_source == "Flyer"


async def test_password_is_stored_hashed(client, test_db):
    await register(client, "Student", "hash@example.com")
    user = (await test_db.execute(
        select(User).where(User.email == "hash@example.com"),
    )).scalar_one()
    assert user.password_hash != PASSWORD
    assert user.password_hash.startswith("$2")


async def test_duplicate_email_rejected(client):
    await register(client, "Student", "dup@example.com")
    res = await client.post("/api/v1/auth/register", json={
        "name": "Again", "email": "DUP@example.com", "password": PASSWORD,
        "role": "Teacher", "instrument": "Piano",
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "EMAIL_EXISTS"


async def test_student_without_referral_source_is_validation_error(client):
    res = await client.post("/api/v1/auth/register", json={
        "name": "No Ref", "email": "noref@example.com", "password": PASSWORD,
        "role": "Student", "instrument": "Piano",
    })
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]


async def test_login_returns_user_summary(client, teacher):
    res = await client.post("/api/v1/auth/login", json={
        "email": "Teacher@Example.com", "password": PASSWORD,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["user"] == {"id": teacher["id"], "name": "Tina Teacher", "role": "Teacher"}


async def test_wrong_password_and_unknown_email_look_the_same(client, teacher):
    wrong = await client.post("/api/v1/auth/login", json={
        "email": "teacher@example.com", "password": "nope-nope",
    })
    unknown = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com", "password": PASSWORD,
    })
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["error"]["code"] == unknown.json()["error"]["code"] == "INVALID_CREDENTIALS"
    assert wrong.json()["error"]["message"] == unknown.json()["error"]["message"]


async def test_logout_acknowledges(client):
    res = await client.post("/api/v1/auth/logout")
    assert res.status_code == 200
    assert res.json()["success"] is True


async def test_error_envelope_carries_correlation_id(client):
    res = await client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": PASSWORD},
        headers={"X-Correlation-ID": "test-correlation-1"},
    )
    assert res.headers["X-Correlation-ID"] == "test-correlation-1"
    context = res.json()["error"]["context"]
    assert context["correlation_id"] == "test-correlation-1"
    assert context["path"] == "/api/v1/auth/login"


async def test_correlation_id_generated_when_missing(client):
    res = await client.post("/api/v1/auth/logout")
    assert res.headers.get("X-Correlation-ID")
