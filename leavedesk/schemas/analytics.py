from pydantic import BaseModel

from leavedesk.schemas.employees import EmployeeResponse
from leavedesk.schemas.holidays import HolidayResponse


class MonthlyTrend(BaseModel):
    month: str  # e.g. "Mar 2025"
    requests: int
    approved: int
    rejected: int


class AnalyticsSummary(BaseModel):
    total_employees: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    employees_on_leave: int
    leave_types: dict[str, int]
    departments: dict[str, int]
    low_balance_employees: list[EmployeeResponse]
    upcoming_holidays: list[HolidayResponse]
    monthly_trends: list[MonthlyTrend]
