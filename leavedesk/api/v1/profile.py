"""The caller's own profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.core.dependencies import get_current_user, get_db
from leavedesk.models.employee import Employee
from leavedesk.schemas.employees import EmployeeResponse, ProfileUpdate
from leavedesk.services.directory import EmployeeDirectory

router = APIRouter(prefix="/user", tags=["profile"])


@router.get("/profile", response_model=EmployeeResponse)
async def get_profile(current_user: Employee = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=EmployeeResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: Employee = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update name, email, department or hire date of the caller."""
    profile = await EmployeeDirectory(db).update(
        current_user.id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return profile
