"""Error Handlers — every failure leaves the API in the same JSON envelope.

Invariants:
    - LessonBookError → its own http_status and to_response() envelope
    - RequestValidationError → 400 VALIDATION_ERROR with one entry per bad field
    - Anything else → 500 INTERNAL_ERROR, message never includes exception text
    - Envelope context carries the request path and correlation_id

Design Decisions:
    - 4xx domain errors logged at WARNING, 5xx at ERROR: booking rule rejections are
      expected traffic, not incidents
    - Kept out of main.py so the entry point only wires things together
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lessonbook.core.errors import ErrorCategory, ErrorSeverity, LessonBookError
from lessonbook.infrastructure.observability import get_correlation_id

logger = logging.getLogger(__name__)


def _envelope(
    request: Request,
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "context": {
                "correlation_id": get_correlation_id(),
                "path": request.url.path,
            },
            **extra,
        },
    }


async def handle_lessonbook_error(request: Request, exc: LessonBookError):
    exc.context.correlation_id = exc.context.correlation_id or get_correlation_id()
    exc.context.path = request.url.path
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Validation error on {request.url.path}: {details}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            request, "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            request, "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the three handler layers: domain, validation, catch-all."""
    app.add_exception_handler(LessonBookError, handle_lessonbook_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
