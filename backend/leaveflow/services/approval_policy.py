"""Approval policies.

A policy decides whether ``approver`` may resolve a request submitted by
``submitter``. The engine only calls the predicate; it knows nothing about
roles.
"""

from typing import Awaitable, Callable

from leaveflow.core.exceptions import ValidationError
from leaveflow.models.employee import Employee
from leaveflow.services.directory import EmployeeDirectory

ApprovalPolicy = Callable[[EmployeeDirectory, Employee, Employee], Awaitable[bool]]


async def allow_any_approver(
    directory: EmployeeDirectory, approver: Employee, submitter: Employee
) -> bool:
    return True


async def require_manager_chain(
    directory: EmployeeDirectory, approver: Employee, submitter: Employee
) -> bool:
    """Approver must be the submitter's manager or above."""
    return await directory.is_in_manager_chain(approver.id, submitter.id)


APPROVAL_POLICIES: dict[str, ApprovalPolicy] = {
    "any": allow_any_approver,
    "manager_chain": require_manager_chain,
}


def get_approval_policy(name: str) -> ApprovalPolicy:
    try:
        return APPROVAL_POLICIES[name]
    except KeyError:
        raise ValidationError(
            f"Unknown approval policy '{name}'. "
            f"Expected one of: {', '.join(APPROVAL_POLICIES)}"
        )
