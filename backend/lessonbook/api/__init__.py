"""HTTP surface — role-scoped routers under /api/v1 plus the shared error handlers.

Invariants:
    - main.py lists every router it mounts; nothing is discovered implicitly
    - Routes parse input and shape output; services decide and persist
"""
