"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic ("now"/"today" are always parameters)

Design Decisions:
    - Functional core separated from imperative shell: scheduling, pricing, lifecycle,
      payment and reporting rules are unit-tested without a database
"""
