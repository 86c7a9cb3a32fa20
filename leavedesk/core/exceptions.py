"""Error taxonomy for the leave service.

Every error carries the HTTP status it maps to; the handlers registered in
``leavedesk.main`` render them as ``{"error": message, "code": ClassName}``.
"""

from typing import Any, Optional

from fastapi import status


class LeaveDeskError(Exception):
    """Base class for all errors raised by the service layer."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


# ── Auth ─────────────────────────────────────────────────────────────────────


class Unauthorized(LeaveDeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authorization required"


class Forbidden(LeaveDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


# ── Lookup / state ───────────────────────────────────────────────────────────


class NotFound(LeaveDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(LeaveDeskError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InvalidTransition(LeaveDeskError):
    default_message = "Leave request is not pending"


# ── Leave request validation ─────────────────────────────────────────────────


class LeaveValidationError(LeaveDeskError):
    """A proposed leave request broke a business rule."""


class InvalidLeaveType(LeaveValidationError):
    default_message = "Invalid leave type"


class InvalidDate(LeaveValidationError):
    default_message = "Dates must be in YYYY-MM-DD format"


class InvalidDateRange(LeaveValidationError):
    default_message = "End date cannot be before start date"


class DateInPast(LeaveValidationError):
    default_message = "Start date cannot be in the past"


class InsufficientBalance(LeaveValidationError):
    default_message = "Insufficient leave balance"


class HolidayConflict(LeaveValidationError):
    def __init__(self, holidays: list[str]):
        self.holidays = list(holidays)
        super().__init__(
            f"Cannot request leave on holidays: {', '.join(self.holidays)}"
        )

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["holidays"] = self.holidays
        return body


class MissingReason(LeaveValidationError):
    default_message = "Please provide a reason for your leave"


# ── Infrastructure ───────────────────────────────────────────────────────────


class StoreUnavailable(LeaveDeskError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Data store is temporarily unavailable"
