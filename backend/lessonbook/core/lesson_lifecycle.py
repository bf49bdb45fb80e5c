"""Lesson Lifecycle — the only allowed lesson status transitions.

Invariants:
    - Scheduled -> Completed and Scheduled -> Cancelled are the only transitions
    - Completed and Cancelled are terminal
    - check_transition is PURE: raises or returns the target, the caller mutates the row
"""

from lessonbook.core.domain_types import LessonStatus
from lessonbook.core.errors import InvalidStatusTransitionError


ALLOWED_TRANSITIONS: dict[LessonStatus, frozenset[LessonStatus]] = {
    LessonStatus.SCHEDULED: frozenset({
        LessonStatus.COMPLETED, LessonStatus.CANCELLED,
    }),
    LessonStatus.COMPLETED: frozenset(),
    LessonStatus.CANCELLED: frozenset(),
}


def is_terminal(status: LessonStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def check_transition(current: str, target: LessonStatus) -> LessonStatus:
    """Validate current -> target. Unknown stored statuses are treated as terminal."""
    try:
        current_status = LessonStatus(current)
    except ValueError:
        raise InvalidStatusTransitionError(current, target.value)
    if target not in ALLOWED_TRANSITIONS[current_status]:
        raise InvalidStatusTransitionError(current_status.value, target.value)
    return target
