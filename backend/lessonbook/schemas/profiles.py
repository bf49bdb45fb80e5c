"""Profile Schemas — teacher profile edits and profile views.

Invariants:
    - custom_lesson_rate >= 0 (None resets to the platform default)
    - instruments_taught wins over the single instrument_taught field when both are sent
"""

from pydantic import BaseModel, Field, model_validator


class UpdateTeacherProfileRequest(BaseModel):
    instruments_taught: list[str] | None = None
    instrument_taught: str | None = Field(None, max_length=100)  # backward compat
    bio: str | None = Field(None, max_length=1000)
    custom_lesson_rate: float | None = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_instruments(self):
        if self.instruments_taught is not None:
            cleaned = [i.strip() for i in self.instruments_taught if i.strip()]
            if not cleaned:
                raise ValueError("instruments_taught must list at least one instrument")
            if len(",".join(cleaned)) > 100:
                raise ValueError("instruments_taught is too long")
            self.instruments_taught = cleaned
        return self


class TeacherProfileResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    instruments: list[str]
    bio: str | None = None
    custom_lesson_rate: float | None = None
    effective_rate: float


class StudentProfileResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    instrument_interest: str
    referral_source: str
