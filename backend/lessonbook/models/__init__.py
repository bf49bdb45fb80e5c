"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the root: profiles, slots and lessons all reference users.id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from lessonbook.models.user import User  # noqa: F401
from lessonbook.models.teacher_profile import TeacherProfile  # noqa: F401
from lessonbook.models.student_profile import StudentProfile  # noqa: F401
from lessonbook.models.availability import Availability  # noqa: F401
from lessonbook.models.lesson import Lesson  # noqa: F401
