"""Business rules for a proposed leave request.

The rules run in a fixed order: caller, leave type, date parsing, date
range, past start, balance, holidays, reason. ``validate_leave_request``
raises the first violation; ``collect_violations`` returns all of them for
interactive form feedback.
"""

from datetime import date, timedelta
from typing import Iterable, Iterator, NamedTuple, Optional, Protocol, Union

from leavedesk.core.exceptions import (
    DateInPast,
    HolidayConflict,
    InsufficientBalance,
    InvalidDate,
    InvalidDateRange,
    InvalidLeaveType,
    LeaveDeskError,
    MissingReason,
    Unauthorized,
)
from leavedesk.models.leave_request import LEAVE_TYPES


class _Requester(Protocol):
    leave_balance: int


class _HolidayLike(Protocol):
    name: str
    date: date


class LeaveProposal(Protocol):
    leave_type: str
    start_date: Union[str, date]
    end_date: Union[str, date]
    reason: str


class LeaveCheck(NamedTuple):
    start_date: date
    end_date: date
    days_requested: int


def parse_date(value: Union[str, date, None]) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidDate("Please select a start and end date")
    try:
        return date.fromisoformat(value.strip())
    except (TypeError, ValueError):
        raise InvalidDate(f"Invalid date '{value}', expected YYYY-MM-DD")


def days_inclusive(start: date, end: date) -> int:
    return (end - start).days + 1


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def conflicting_holidays(
    start: date, end: date, holidays: Iterable[_HolidayLike]
) -> list[str]:
    """Names of every holiday that falls inside [start, end]."""
    return [h.name for h in holidays if start <= h.date <= end]


def _iter_violations(
    employee: Optional[_Requester],
    proposal: LeaveProposal,
    holidays: Iterable[_HolidayLike],
    today: date,
) -> Iterator[LeaveDeskError]:
    if employee is None:
        yield Unauthorized()
        return

    if proposal.leave_type not in LEAVE_TYPES:
        yield InvalidLeaveType(
            f"Invalid leave type '{proposal.leave_type}'. "
            f"Expected one of: {', '.join(LEAVE_TYPES)}"
        )

    try:
        start = parse_date(proposal.start_date)
        end = parse_date(proposal.end_date)
    except InvalidDate as exc:
        yield exc
    else:
        if end < start:
            yield InvalidDateRange()
        if start < today:
            yield DateInPast()
        if end >= start:
            days = days_inclusive(start, end)
            if days > employee.leave_balance:
                yield InsufficientBalance(
                    f"Insufficient leave balance. You have {employee.leave_balance} "
                    f"days remaining, but requested {days} days."
                )
            names = conflicting_holidays(start, end, holidays)
            if names:
                yield HolidayConflict(names)

    if not (proposal.reason or "").strip():
        yield MissingReason()


def collect_violations(
    employee: Optional[_Requester],
    proposal: LeaveProposal,
    holidays: Iterable[_HolidayLike],
    today: date,
) -> list[LeaveDeskError]:
    return list(_iter_violations(employee, proposal, list(holidays), today))


def validate_leave_request(
    employee: Optional[_Requester],
    proposal: LeaveProposal,
    holidays: Iterable[_HolidayLike],
    today: date,
) -> LeaveCheck:
    """Check a proposal and return the parsed dates and inclusive day count.

    Raises the first rule violation in precedence order.
    """
    for violation in _iter_violations(employee, proposal, list(holidays), today):
        raise violation
    start = parse_date(proposal.start_date)
    end = parse_date(proposal.end_date)
    return LeaveCheck(start, end, days_inclusive(start, end))
