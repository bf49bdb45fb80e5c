"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain enums from core/ used for role, mode and status fields
    - Datetimes leaving a schema are naive UTC (core.domain_types.to_naive_utc)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
