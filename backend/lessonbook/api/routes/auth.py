"""Auth Routes — registration, login and logout.

Invariants:
    - Login never reveals whether the email or the password was wrong
    - Logout is a stateless acknowledgement (the browser holds the user in sessionStorage)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from lessonbook.infrastructure.database import get_db
from lessonbook.schemas.auth import (
    LoginRequest, LoginResponse, RegisterRequest, UserSummary,
)
from lessonbook.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account and the profile matching its role."""
    user = await AuthService(db).register(body)
    return {
        "success": True,
        "message": "Registration successful. Please log in.",
        "user": UserSummary(id=user.id, name=user.name, role=user.role),
    }


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await AuthService(db).authenticate(body.email, body.password)
    return LoginResponse(
        user=UserSummary(id=user.id, name=user.name, role=user.role),
    )


@router.post("/logout")
async def logout():
    return {"success": True, "message": "Logged out."}
