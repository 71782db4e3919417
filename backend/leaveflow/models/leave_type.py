from enum import Enum


class LeaveType(str, Enum):
    CASUAL = "Casual Leave"
    SICK = "Sick Leave"
    EARNED = "Earned Leave"
    PRIVILEGE = "Privilege Leave"
    MATERNITY = "Maternity Leave"
    PATERNITY = "Paternity Leave"
    COMPENSATORY_OFF = "Compensatory Off"
    LEAVE_WITHOUT_PAY = "Leave Without Pay"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


LEAVE_TYPES: tuple[str, ...] = tuple(t.value for t in LeaveType)

# Employee column holding the allotment for each leave category
ALLOTMENT_COLUMNS: dict[LeaveType, str] = {
    LeaveType.CASUAL: "casual_leave",
    LeaveType.SICK: "sick_leave",
    LeaveType.EARNED: "earned_leave",
    LeaveType.PRIVILEGE: "privilege_leave",
    LeaveType.MATERNITY: "maternity_leave",
    LeaveType.PATERNITY: "paternity_leave",
    LeaveType.COMPENSATORY_OFF: "compensatory_off",
    LeaveType.LEAVE_WITHOUT_PAY: "leave_without_pay",
}


def parse_leave_type(value: str) -> LeaveType | None:
    """Return the matching category, or None if the label is unknown."""
    try:
        return LeaveType(value)
    except ValueError:
        return None
