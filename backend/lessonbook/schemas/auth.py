"""Auth Schemas — registration and login payloads.

Invariants:
    - email lower-cased and validated (EmailStr)
    - password 6-72 chars (72 is the bcrypt input limit)
    - instrument required for every role; referral_source required for students
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from lessonbook.core.domain_types import UserRole


class RegisterRequest(BaseModel):
    """Account registration — creates the matching profile for the role."""
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    role: UserRole
    contact_info: str | None = Field(None, max_length=200)
    instrument: str = Field(min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=1000)
    referral_source: str | None = Field(None, max_length=50)

    @field_validator("name", "instrument")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty or whitespace")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def require_referral_for_students(self):
        if self.role == UserRole.STUDENT and not (
            self.referral_source and self.referral_source.strip()
        ):
            raise ValueError("referral_source is required for students")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserSummary(BaseModel):
    id: int
    name: str
    role: UserRole


class LoginResponse(BaseModel):
    success: bool = True
    user: UserSummary
