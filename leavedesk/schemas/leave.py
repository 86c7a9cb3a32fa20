from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class LeaveRequestCreate(BaseModel):
    # Dates stay strings here so that a bad date is reported by the leave
    # rules, in their order, instead of by request parsing.
    leave_type: str
    start_date: str
    end_date: str
    reason: str = ""


class LeaveStatusUpdate(BaseModel):
    status: str  # approved, rejected


class LeaveRequestResponse(BaseModel):
    id: UUID
    employee_id: UUID
    employee_name: str
    leave_type: str
    start_date: date
    end_date: date
    days_requested: int
    reason: str
    status: str
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None

    model_config = {"from_attributes": True}


class LeaveValidationResponse(BaseModel):
    valid: bool
    days_requested: Optional[int] = None
    errors: list[str] = []
