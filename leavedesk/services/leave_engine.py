"""Leave request lifecycle: submission, listing and review.

This is the only code that writes ``leave_requests`` rows or applies a
request's effect to ``employees.leave_balance``. A decision is one unit of
work: the status change is a compare-and-swap on ``status = 'pending'`` and
the balance decrement is conditional on enough balance remaining, so two
reviewers racing on the same request cannot both succeed and an approval
never drives a balance negative. Any failure after the status write is
raised and the caller's session rolls the whole unit back.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.core.clock import Clock
from leavedesk.core.exceptions import (
    InsufficientBalance,
    InvalidDate,
    InvalidTransition,
    LeaveValidationError,
    NotFound,
    Unauthorized,
)
from leavedesk.core.security import ensure_role
from leavedesk.models.employee import Employee
from leavedesk.models.leave_request import (
    DECISIONS,
    STATUS_APPROVED,
    STATUS_PENDING,
    LeaveRequest,
)
from leavedesk.services.directory import HolidayCalendar
from leavedesk.services.leave_rules import (
    LeaveProposal,
    collect_violations,
    days_inclusive,
    parse_date,
    validate_leave_request,
)

logger = logging.getLogger(__name__)


class LeaveRequestEngine:
    def __init__(self, db: AsyncSession, clock: Clock):
        self.db = db
        self.clock = clock
        self.calendar = HolidayCalendar(db)

    async def _requester(self, employee_id: Optional[UUID]) -> Optional[Employee]:
        if employee_id is None:
            return None
        return await self.db.get(Employee, employee_id)

    async def _holidays_for(self, proposal: LeaveProposal):
        try:
            start = parse_date(proposal.start_date)
            end = parse_date(proposal.end_date)
        except InvalidDate:
            return []
        if end < start:
            return []
        return await self.calendar.between(start, end)

    # ── Queries ──────────────────────────────────────────────────────────────

    async def list_requests(
        self,
        caller: Employee,
        status: Optional[str] = None,
        leave_type: Optional[str] = None,
    ) -> list[LeaveRequest]:
        """Admins see every request; everyone else only their own."""
        query = select(LeaveRequest)
        if not caller.is_admin:
            query = query.where(LeaveRequest.employee_id == caller.id)
        if status:
            query = query.where(LeaveRequest.status == status)
        if leave_type:
            query = query.where(LeaveRequest.leave_type == leave_type)
        result = await self.db.execute(query.order_by(LeaveRequest.created_at.desc()))
        return list(result.scalars().all())

    async def get(self, request_id: UUID) -> LeaveRequest:
        leave_req = await self.db.get(LeaveRequest, request_id)
        if leave_req is None:
            raise NotFound("Leave request not found")
        return leave_req

    async def preview(
        self, employee_id: Optional[UUID], proposal: LeaveProposal
    ) -> tuple[Optional[int], list[str]]:
        """Run every rule without persisting; returns (days, error messages)."""
        employee = await self._requester(employee_id)
        holidays = await self._holidays_for(proposal)
        violations = collect_violations(employee, proposal, holidays, self.clock.today())
        days = None
        try:
            start = parse_date(proposal.start_date)
            end = parse_date(proposal.end_date)
            if end >= start:
                days = days_inclusive(start, end)
        except InvalidDate:
            pass
        return days, [v.message for v in violations]

    # ── Commands ─────────────────────────────────────────────────────────────

    async def submit(
        self, employee_id: Optional[UUID], proposal: LeaveProposal
    ) -> LeaveRequest:
        """Validate and store a new pending request for the employee."""
        employee = await self._requester(employee_id)
        if employee is None:
            raise Unauthorized("User profile not found")

        holidays = await self._holidays_for(proposal)
        try:
            check = validate_leave_request(
                employee, proposal, holidays, self.clock.today()
            )
        except LeaveValidationError as exc:
            logger.info(
                "Leave request from %s refused: %s (%s)", employee.id, exc.code, exc.message
            )
            raise

        leave_req = LeaveRequest(
            employee_id=employee.id,
            employee_name=employee.name,
            leave_type=proposal.leave_type,
            start_date=check.start_date,
            end_date=check.end_date,
            days_requested=check.days_requested,
            reason=proposal.reason.strip(),
            status=STATUS_PENDING,
            created_at=self.clock.now(),
        )
        self.db.add(leave_req)
        await self.db.flush()
        await self.db.refresh(leave_req)
        logger.info(
            "Leave request %s submitted by %s: %s, %d day(s)",
            leave_req.id,
            employee.id,
            leave_req.leave_type,
            leave_req.days_requested,
        )
        return leave_req

    async def decide(
        self, request_id: UUID, decision: str, reviewer: Employee
    ) -> LeaveRequest:
        """Approve or reject a pending request.

        Approval deducts ``days_requested`` from the owner's balance in the
        same transaction as the status change.
        """
        ensure_role(reviewer, "admin")
        if decision not in DECISIONS:
            raise InvalidTransition("Status must be 'approved' or 'rejected'")

        leave_req = await self.get(request_id)
        if leave_req.status != STATUS_PENDING:
            raise InvalidTransition(
                f"Cannot update a leave request with status '{leave_req.status}'"
            )

        swapped = await self.db.execute(
            update(LeaveRequest)
            .where(LeaveRequest.id == request_id, LeaveRequest.status == STATUS_PENDING)
            .values(
                status=decision,
                reviewed_at=self.clock.now(),
                reviewed_by=reviewer.name,
            )
            .execution_options(synchronize_session=False)
        )
        if swapped.rowcount != 1:
            # Another reviewer decided between our read and write
            raise InvalidTransition("Leave request has already been decided")

        if decision == STATUS_APPROVED:
            await self._deduct_balance(leave_req.employee_id, leave_req.days_requested)

        await self.db.flush()
        await self.db.refresh(leave_req)
        logger.info(
            "Leave request %s %s by %s", leave_req.id, decision, reviewer.name
        )
        return leave_req

    async def _deduct_balance(self, employee_id: UUID, days: int) -> None:
        deducted = await self.db.execute(
            update(Employee)
            .where(Employee.id == employee_id, Employee.leave_balance >= days)
            .values(leave_balance=Employee.leave_balance - days)
            .execution_options(synchronize_session=False)
        )
        if deducted.rowcount == 1:
            # Keep any already-loaded instance in step with the row
            await self.db.get(Employee, employee_id, populate_existing=True)
            return

        remaining = await self.db.scalar(
            select(Employee.leave_balance).where(Employee.id == employee_id)
        )
        if remaining is None:
            raise NotFound("Employee for this leave request no longer exists")
        raise InsufficientBalance(
            f"Insufficient leave balance. Employee has {remaining} days remaining, "
            f"but the request is for {days} days."
        )
