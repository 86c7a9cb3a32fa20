from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.api.v1.schemas import SuccessResponse
from leavedesk.core.clock import Clock, get_clock
from leavedesk.core.dependencies import get_current_user, get_db
from leavedesk.core.security import require_role
from leavedesk.models.employee import Employee
from leavedesk.schemas.holidays import HolidayCreate, HolidayResponse
from leavedesk.services.directory import HolidayCalendar

router = APIRouter(prefix="/holidays", tags=["holidays"])


@router.get("", response_model=list[HolidayResponse])
async def list_holidays(
    upcoming_days: Optional[int] = Query(None, ge=0, le=366),
    current_user: Employee = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """All holidays by date, or only those in the next ``upcoming_days`` days."""
    calendar = HolidayCalendar(db)
    if upcoming_days is not None:
        return await calendar.upcoming(clock.today(), upcoming_days)
    return await calendar.list()


@router.post("", response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
async def create_holiday(
    data: HolidayCreate,
    current_user: Employee = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    holiday = await HolidayCalendar(db).create(
        {**data.model_dump(), "created_at": clock.now()}
    )
    await db.commit()
    return holiday


@router.delete("/{holiday_id}", response_model=SuccessResponse)
async def delete_holiday(
    holiday_id: UUID,
    current_user: Employee = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
):
    await HolidayCalendar(db).delete(holiday_id)
    await db.commit()
    return SuccessResponse()
