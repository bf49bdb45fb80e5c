"""Initial schema — users, teacher_profiles, student_profiles, availabilities, lessons.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("contact_info", sa.String(200), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "teacher_profiles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("instrument_taught", sa.String(100), nullable=False),
        sa.Column("bio", sa.String(1000), nullable=True),
        sa.Column("custom_lesson_rate", sa.Float, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.CheckConstraint(
            "custom_lesson_rate IS NULL OR custom_lesson_rate >= 0",
            name="ck_teacher_profiles_rate_non_negative",
        ),
    )

    op.create_table(
        "student_profiles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("instrument_interest", sa.String(100), nullable=False),
        sa.Column("referral_source", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "availabilities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "teacher_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("start_date_time", sa.DateTime, nullable=False),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.CheckConstraint(
            "duration >= 1 AND duration <= 480",
            name="ck_availabilities_duration_range",
        ),
    )
    op.create_index(
        "ix_availabilities_teacher_id", "availabilities", ["teacher_id"],
    )

    op.create_table(
        "lessons",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "teacher_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "student_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("instrument", sa.String(100), nullable=False),
        sa.Column("start_date_time", sa.DateTime, nullable=False),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("recurring_series_id", sa.Uuid, nullable=True),
        sa.Column("sheet_music_path", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_lessons_price_non_negative"),
        sa.CheckConstraint(
            "duration >= 1 AND duration <= 480",
            name="ck_lessons_duration_range",
        ),
    )
    op.create_index("ix_lessons_teacher_id", "lessons", ["teacher_id"])
    op.create_index("ix_lessons_student_id", "lessons", ["student_id"])
    op.create_index(
        "ix_lessons_recurring_series_id", "lessons", ["recurring_series_id"],
    )


def downgrade() -> None:
    op.drop_table("lessons")
    op.drop_table("availabilities")
    op.drop_table("student_profiles")
    op.drop_table("teacher_profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
