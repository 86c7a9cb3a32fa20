from leavedesk.models.employee import Employee
from leavedesk.models.user import User
from leavedesk.models.holiday import Holiday
from leavedesk.models.leave_request import LeaveRequest

__all__ = [
    "Employee",
    "User",
    "Holiday",
    "LeaveRequest",
]
