"""Directory and holiday calendar access.

Plain CRUD over the ``employees`` and ``holidays`` tables. Nothing here
enforces leave rules; callers (the leave engine, the admin routes) do.
Unknown ids raise ``NotFound``.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.core.exceptions import Conflict, NotFound
from leavedesk.models.employee import Employee
from leavedesk.models.holiday import Holiday
from leavedesk.models.user import User

logger = logging.getLogger(__name__)


class EmployeeDirectory:
    """Employee records backed by the local database."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self, role: Optional[str] = None, department: Optional[str] = None
    ) -> list[Employee]:
        query = select(Employee)
        if role:
            query = query.where(Employee.role == role)
        if department:
            query = query.where(Employee.department == department)
        result = await self.db.execute(query.order_by(Employee.name))
        return list(result.scalars().all())

    async def get(self, employee_id: UUID) -> Employee:
        employee = await self.db.get(Employee, employee_id)
        if employee is None:
            raise NotFound("Employee not found")
        return employee

    async def create(self, data: dict[str, Any]) -> Employee:
        employee = Employee(**data)
        self.db.add(employee)
        await self.db.flush()
        await self.db.refresh(employee)
        logger.info("Employee %s created (%s)", employee.id, employee.email)
        return employee

    async def update(self, employee_id: UUID, changes: dict[str, Any]) -> Employee:
        """Apply ``changes``. A new email is carried over to the linked login."""
        employee = await self.get(employee_id)
        new_email = changes.get("email")
        if new_email and new_email != employee.email:
            await self._move_login_email(employee_id, new_email)
        for field, value in changes.items():
            setattr(employee, field, value)
        await self.db.flush()
        await self.db.refresh(employee)
        return employee

    async def delete(self, employee_id: UUID) -> None:
        """Remove the directory entry. Leave history is left in place."""
        employee = await self.get(employee_id)
        await self.db.execute(
            update(User).where(User.employee_id == employee_id).values(employee_id=None)
        )
        await self.db.delete(employee)
        await self.db.flush()
        logger.info("Employee %s deleted", employee_id)

    async def _move_login_email(self, employee_id: UUID, new_email: str) -> None:
        result = await self.db.execute(select(User).where(User.email == new_email))
        holder = result.scalar_one_or_none()
        if holder is not None and holder.employee_id != employee_id:
            raise Conflict("Email already registered")
        await self.db.execute(
            update(User).where(User.employee_id == employee_id).values(email=new_email)
        )


class HolidayCalendar:
    """Company and public holidays. Holidays are never edited in place."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> list[Holiday]:
        result = await self.db.execute(select(Holiday).order_by(Holiday.date))
        return list(result.scalars().all())

    async def between(self, start: date, end: date) -> list[Holiday]:
        """Holidays falling on any day in the inclusive range."""
        result = await self.db.execute(
            select(Holiday)
            .where(Holiday.date >= start, Holiday.date <= end)
            .order_by(Holiday.date, Holiday.name)
        )
        return list(result.scalars().all())

    async def upcoming(self, today: date, days: int = 30) -> list[Holiday]:
        return await self.between(today, today + timedelta(days=days))

    async def create(self, data: dict[str, Any]) -> Holiday:
        holiday = Holiday(**data)
        self.db.add(holiday)
        await self.db.flush()
        await self.db.refresh(holiday)
        logger.info("Holiday %s on %s created", holiday.name, holiday.date)
        return holiday

    async def delete(self, holiday_id: UUID) -> None:
        holiday = await self.db.get(Holiday, holiday_id)
        if holiday is None:
            raise NotFound("Holiday not found")
        await self.db.delete(holiday)
        await self.db.flush()
