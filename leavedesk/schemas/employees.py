from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from leavedesk.core.config import settings
from leavedesk.models.employee import ROLES

ROLE_PATTERN = f"^({'|'.join(ROLES)})$"


class EmployeeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    department: str = ""
    role: str = Field(default="employee", pattern=ROLE_PATTERN)
    hire_date: Optional[date] = None
    leave_balance: int = Field(
        default_factory=lambda: settings.DEFAULT_LEAVE_BALANCE, ge=0
    )


class EmployeeUpdate(BaseModel):
    """Admin edit. Setting leave_balance here is a manual adjustment."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    role: Optional[str] = Field(None, pattern=ROLE_PATTERN)
    hire_date: Optional[date] = None
    leave_balance: Optional[int] = Field(None, ge=0)


class ProfileUpdate(BaseModel):
    """Self-service edit; role and balance are not editable by the owner."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None


class EmployeeResponse(BaseModel):
    id: UUID
    name: str
    email: str
    department: str
    role: str
    hire_date: Optional[date] = None
    leave_balance: int
    created_at: datetime

    model_config = {"from_attributes": True}
