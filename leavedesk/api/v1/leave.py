from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.core.clock import Clock, get_clock
from leavedesk.core.dependencies import get_current_user, get_db
from leavedesk.core.security import require_role
from leavedesk.models.employee import Employee
from leavedesk.schemas.leave import (
    LeaveRequestCreate,
    LeaveRequestResponse,
    LeaveStatusUpdate,
    LeaveValidationResponse,
)
from leavedesk.services.leave_engine import LeaveRequestEngine

router = APIRouter(prefix="/leave-requests", tags=["leave"])


def get_engine(
    db: AsyncSession = Depends(get_db), clock: Clock = Depends(get_clock)
) -> LeaveRequestEngine:
    return LeaveRequestEngine(db, clock)


@router.get("", response_model=list[LeaveRequestResponse])
async def list_leave_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    leave_type: Optional[str] = None,
    current_user: Employee = Depends(get_current_user),
    engine: LeaveRequestEngine = Depends(get_engine),
):
    """List leave requests. Admins see all; employees see their own."""
    return await engine.list_requests(
        current_user, status=status_filter, leave_type=leave_type
    )


@router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_leave_request(
    data: LeaveRequestCreate,
    current_user: Employee = Depends(get_current_user),
    engine: LeaveRequestEngine = Depends(get_engine),
    db: AsyncSession = Depends(get_db),
):
    """Submit a new leave request; it starts out pending."""
    leave_req = await engine.submit(current_user.id, data)
    await db.commit()
    return leave_req


@router.post("/validate", response_model=LeaveValidationResponse)
async def validate_leave_request(
    data: LeaveRequestCreate,
    current_user: Employee = Depends(get_current_user),
    engine: LeaveRequestEngine = Depends(get_engine),
):
    """Dry run: report every rule the request would break."""
    days, errors = await engine.preview(current_user.id, data)
    return LeaveValidationResponse(valid=not errors, days_requested=days, errors=errors)


@router.put("/{request_id}/status", response_model=LeaveRequestResponse)
async def update_leave_request_status(
    request_id: UUID,
    data: LeaveStatusUpdate,
    current_user: Employee = Depends(require_role("admin")),
    engine: LeaveRequestEngine = Depends(get_engine),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a pending leave request (admin only)."""
    leave_req = await engine.decide(request_id, data.status, current_user)
    await db.commit()
    return leave_req
