from leaveflow.models.employee import Employee
from leaveflow.models.leave_application import LeaveApplication
from leaveflow.models.leave_type import LeaveStatus, LeaveType

__all__ = [
    "Employee",
    "LeaveApplication",
    "LeaveStatus",
    "LeaveType",
]
