"""Exception hierarchy for the leave workflow.

Every error carries a machine-readable ``error_code`` and optional
``details``. The API layer maps each class to an HTTP status in
``leaveflow.main``; the engine and stores never raise ``HTTPException``
themselves so they stay usable outside a request.
"""

from typing import Any, Dict, Optional


class LeaveFlowError(Exception):
    """Base class for all workflow errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(LeaveFlowError):
    """Malformed input: unknown leave type, non-positive days, bad date range."""


class NotFoundError(LeaveFlowError):
    """A referenced employee or leave application does not exist."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            f"{resource} {identifier} not found",
            details={"resource": resource, "id": identifier},
        )


class ConflictError(LeaveFlowError):
    """Transition attempted on an application that is no longer pending."""

    def __init__(self, application_id: int, current_status: Optional[str] = None):
        self.application_id = application_id
        self.current_status = current_status
        if current_status:
            message = (
                f"Leave application {application_id} is already '{current_status}'"
            )
        else:
            message = f"Leave application {application_id} was resolved concurrently"
        super().__init__(
            message,
            details={"application_id": application_id, "status": current_status},
        )


class PermissionDeniedError(LeaveFlowError):
    """The approval policy refused the approver for this submitter."""


class DependencyError(LeaveFlowError):
    """The directory or application store is unreachable. Safe to retry."""


class NotificationError(LeaveFlowError):
    """A notification could not be delivered. Logged, never surfaced."""
