"""Error Hierarchy — typed, categorized exceptions for all LessonBook failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with LessonBookError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: str | None = None
    path: str | None = None
    user_id: int | None = None
    lesson_id: int | None = None
    debug_info: dict[str, Any] | None = None


class LessonBookError(Exception):
    """Base exception for all LessonBook errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "correlation_id": self.context.correlation_id,
                    "path": self.context.path,
                    "user_id": self.context.user_id,
                    "lesson_id": self.context.lesson_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class BookingValidationError(LessonBookError):
    """Request passed schema validation but breaks a booking rule."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class TimeConflictError(LessonBookError):
    """Requested time range overlaps an existing slot or lesson."""
    def __init__(
        self,
        message: str = "This time slot conflicts with an existing availability.",
        code: str = "TIME_CONFLICT",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class InvalidStatusTransitionError(LessonBookError):
    """Lesson status change not allowed from its current state."""
    def __init__(self, current: str, target: str, context: ErrorContext | None = None):
        if current == target == "Cancelled":
            message, code = "This lesson is already cancelled.", "ALREADY_CANCELLED"
        else:
            message = f"Cannot change lesson status from {current} to {target}."
            code = "INVALID_STATUS_TRANSITION"
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.current = current
        self.target = target


class ResourceNotFoundError(LessonBookError):
    """Requested resource does not exist (or is not owned by the caller)."""
    def __init__(
        self,
        resource_type: str,
        resource_id: int | str,
        code: str = "RESOURCE_NOT_FOUND",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class EmailAlreadyRegisteredError(LessonBookError):
    """Registration attempted with an email that already has an account."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "This email is already registered. Please log in instead.",
            "EMAIL_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class InvalidCredentialsError(LessonBookError):
    """Unknown email or wrong password. Both cases share one message."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid email or password.",
            "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(LessonBookError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class FileStorageError(LessonBookError):
    """Uploaded file could not be written to disk."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UPLOAD_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class FileTooLargeError(LessonBookError):
    """Upload exceeds the configured size cap."""
    def __init__(self, max_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"File is too large. The limit is {max_bytes // (1024 * 1024)} MB.",
            "FILE_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
