from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.core.clock import Clock, get_clock
from leavedesk.core.dependencies import get_db
from leavedesk.core.security import require_role
from leavedesk.models.employee import Employee
from leavedesk.schemas.analytics import AnalyticsSummary
from leavedesk.services.analytics import build_summary

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=AnalyticsSummary)
async def get_summary(
    current_user: Employee = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Headline numbers for the admin dashboard."""
    return await build_summary(db, clock.today())
