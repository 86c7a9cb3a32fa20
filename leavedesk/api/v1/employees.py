from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.api.v1.schemas import SuccessResponse
from leavedesk.core.clock import Clock, get_clock
from leavedesk.core.dependencies import get_current_user, get_db
from leavedesk.core.security import require_role
from leavedesk.models.employee import Employee
from leavedesk.schemas.employees import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
)
from leavedesk.services.directory import EmployeeDirectory

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    role: Optional[str] = None,
    department: Optional[str] = None,
    current_user: Employee = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the employee directory."""
    return await EmployeeDirectory(db).list(role=role, department=department)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    current_user: Employee = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeDirectory(db).get(employee_id)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate,
    current_user: Employee = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Add an employee record (admin only)."""
    employee = await EmployeeDirectory(db).create(
        {**data.model_dump(), "created_at": clock.now()}
    )
    await db.commit()
    return employee


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    data: EmployeeUpdate,
    current_user: Employee = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
):
    """Partially update an employee record (admin only)."""
    employee = await EmployeeDirectory(db).update(
        employee_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return employee


@router.delete("/{employee_id}", response_model=SuccessResponse)
async def delete_employee(
    employee_id: UUID,
    current_user: Employee = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
):
    """Remove an employee from the directory; their leave history stays."""
    await EmployeeDirectory(db).delete(employee_id)
    await db.commit()
    return SuccessResponse()
