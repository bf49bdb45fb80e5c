"""Infrastructure Layer — database, password hashing, file storage and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All database failures surface as DatabaseError

Design Decisions:
    - Thin wrappers over SQLAlchemy, passlib and the filesystem (ADR: single responsibility)
"""
