"""Authentication endpoints: signup, login."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.api.v1.schemas import (
    LoginRequest,
    SignupRequest,
    SuccessResponse,
    TokenResponse,
)
from leavedesk.core.clock import Clock, get_clock
from leavedesk.core.config import settings
from leavedesk.core.dependencies import get_db
from leavedesk.core.exceptions import Conflict, Forbidden, Unauthorized
from leavedesk.core.security import create_access_token, hash_password, verify_password
from leavedesk.models.employee import Employee
from leavedesk.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ── POST /signup ──────────────────────────────────────────────────────────────


@router.post("/signup", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create a login and its profile with the default leave balance."""
    existing = await db.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise Conflict("Email already registered")

    profile = Employee(
        name=body.name,
        email=body.email,
        role=body.role,
        department="",
        hire_date=clock.today(),
        leave_balance=settings.DEFAULT_LEAVE_BALANCE,
        created_at=clock.now(),
    )
    db.add(profile)
    await db.flush()  # get profile.id

    user = User(
        email=body.email,
        hashed_password=hash_password(body.password),
        employee_id=profile.id,
        created_at=clock.now(),
    )
    db.add(user)
    await db.commit()

    logger.info("Signed up %s as %s", body.email, body.role)
    return SuccessResponse()


# ── POST /login ───────────────────────────────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(body.password, user.hashed_password):
        raise Unauthorized("Invalid email or password")

    if not user.is_active:
        raise Forbidden("Account is deactivated")

    token = create_access_token({"sub": str(user.id)})
    return TokenResponse(access_token=token)
