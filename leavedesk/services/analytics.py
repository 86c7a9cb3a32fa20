"""Read-only summaries for the admin dashboard."""

import calendar
from datetime import date, datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.core.config import settings
from leavedesk.models.employee import Employee
from leavedesk.models.leave_request import (
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    LeaveRequest,
)
from leavedesk.services.directory import HolidayCalendar

TREND_MONTHS = 6
UPCOMING_HOLIDAY_DAYS = 30


def _months_back(today: date, count: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the last ``count`` months, oldest first."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


async def build_summary(db: AsyncSession, today: date) -> dict:
    total_employees = (
        await db.execute(select(func.count()).select_from(Employee))
    ).scalar() or 0

    status_rows = await db.execute(
        select(LeaveRequest.status, func.count()).group_by(LeaveRequest.status)
    )
    by_status = dict(status_rows.all())

    type_rows = await db.execute(
        select(LeaveRequest.leave_type, func.count()).group_by(LeaveRequest.leave_type)
    )

    dept_rows = await db.execute(
        select(Employee.department, func.count())
        .where(Employee.department != "")
        .group_by(Employee.department)
    )

    on_leave = (
        await db.execute(
            select(func.count(func.distinct(LeaveRequest.employee_id))).where(
                LeaveRequest.status == STATUS_APPROVED,
                LeaveRequest.start_date <= today,
                LeaveRequest.end_date >= today,
            )
        )
    ).scalar() or 0

    low_balance = (
        await db.execute(
            select(Employee)
            .where(Employee.leave_balance <= settings.LOW_BALANCE_THRESHOLD)
            .order_by(Employee.leave_balance, Employee.name)
        )
    ).scalars().all()

    upcoming = await HolidayCalendar(db).upcoming(today, UPCOMING_HOLIDAY_DAYS)

    months = _months_back(today, TREND_MONTHS)
    first_year, first_month = months[0]
    created = await db.execute(
        select(LeaveRequest.created_at, LeaveRequest.status).where(
            LeaveRequest.created_at
            >= datetime(first_year, first_month, 1, tzinfo=timezone.utc)
        )
    )
    buckets = {ym: {"requests": 0, "approved": 0, "rejected": 0} for ym in months}
    for created_at, status in created.all():
        bucket = buckets.get((created_at.year, created_at.month))
        if bucket is None:
            continue
        bucket["requests"] += 1
        if status in (STATUS_APPROVED, STATUS_REJECTED):
            bucket[status] += 1

    return {
        "total_employees": total_employees,
        "pending_requests": by_status.get(STATUS_PENDING, 0),
        "approved_requests": by_status.get(STATUS_APPROVED, 0),
        "rejected_requests": by_status.get(STATUS_REJECTED, 0),
        "employees_on_leave": on_leave,
        "leave_types": dict(type_rows.all()),
        "departments": dict(dept_rows.all()),
        "low_balance_employees": list(low_balance),
        "upcoming_holidays": upcoming,
        "monthly_trends": [
            {"month": f"{calendar.month_abbr[m]} {y}", **buckets[(y, m)]}
            for y, m in months
        ],
    }
