"""Health Probes — process liveness and database readiness.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process can serve requests
    - GET /api/v1/health/ready answers 503 until the database accepts a SELECT 1
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from lessonbook.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE = {"service": "lessonbook-api", "version": "1.0.0"}


@router.get("/")
async def liveness():
    return {"status": "healthy", **SERVICE}


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    if manager is not None and await manager.health_check():
        return {"status": "ready", "checks": {"database": "healthy"}}
    logger.warning("Readiness probe failed: database unavailable")
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "database_unavailable"},
    )
