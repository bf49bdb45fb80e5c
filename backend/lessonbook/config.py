"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (admin password, database credentials) come from environment variables in production
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: a fresh checkout runs against a local SQLite file
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./lessonbook.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_tables: bool = True

    # Bootstrap admin account
    admin_email: str = "admin@lessonbook.com"
    admin_password: str = "admin123"
    admin_name: str = "Admin User"

    # Booking rules
    default_lesson_rate: float = 30.00
    min_availability_minutes: int = 15
    max_availability_minutes: int = 480
    upcoming_lessons_limit: int = 5
    max_recurring_occurrences: int = 52

    # Files
    uploads_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    static_dir: str = "static"

    # API
    cors_origins: list[str] = [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
