"""Leave application lifecycle engine.

State machine::

    pending ──approve──▶ approved
       │
       └────reject────▶ rejected

Both target states are terminal. Approval flips the status and adds the
requested days to the submitter's ``leaves_taken`` in one transaction; the
flip is guarded by ``status = 'pending'`` so two racing resolutions cannot
both succeed. Notifications are published only after the transaction has
committed and their failure never undoes the transition.

Each command first checks its preconditions without writing anything, so a
refused command (unknown id, already resolved, policy denial) leaves the
session and the instances loaded through it untouched. Only a failure after
the first write rolls the session back.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import AsyncIterator, Optional

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from leaveflow.core.exceptions import (
    ConflictError,
    DependencyError,
    PermissionDeniedError,
    ValidationError,
)
from leaveflow.models.employee import Employee
from leaveflow.models.leave_application import LeaveApplication
from leaveflow.models.leave_type import LEAVE_TYPES, LeaveStatus, parse_leave_type
from leaveflow.services.application_store import ApplicationFilter, LeaveApplicationStore
from leaveflow.services.approval_policy import ApprovalPolicy, allow_any_approver
from leaveflow.services.directory import EmployeeDirectory
from leaveflow.services.ledger import BalanceLedger
from leaveflow.services.notifications import (
    LeaveNotification,
    NotificationSink,
    approval_notice,
    rejection_notice,
    submission_notice,
)

logger = logging.getLogger(__name__)


class LeaveLifecycleEngine:
    def __init__(
        self,
        db: AsyncSession,
        notifier: NotificationSink,
        approval_policy: ApprovalPolicy = allow_any_approver,
    ):
        self.db = db
        self.directory = EmployeeDirectory(db)
        self.store = LeaveApplicationStore(db)
        self.ledger = BalanceLedger(self.directory)
        self.notifier = notifier
        self.approval_policy = approval_policy

    @staticmethod
    def _unavailable(error: Exception) -> DependencyError:
        return DependencyError(
            "Leave storage is unavailable, please retry",
            details={"cause": type(getattr(error, "orig", None) or error).__name__},
        )

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[None]:
        """Read-only block: workflow errors pass through without a rollback.

        Connection-level failures surface as ``DependencyError``.
        """
        try:
            yield
        except (OperationalError, InterfaceError) as e:
            await self.db.rollback()
            raise self._unavailable(e) from e

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[None]:
        """Write block: commit on success, roll back on any error."""
        try:
            yield
            await self.db.commit()
        except (OperationalError, InterfaceError) as e:
            await self.db.rollback()
            raise self._unavailable(e) from e
        except Exception:
            await self.db.rollback()
            raise

    # ── Commands ─────────────────────────────────────────────────────────

    async def submit(
        self,
        employee_id: int,
        leave_type: str,
        start_date: date,
        end_date: date,
        days_requested: int,
        reason: str = "",
    ) -> LeaveApplication:
        """Create a pending application and notify the submitter's manager."""
        category = self._validate_submission(
            leave_type, start_date, end_date, days_requested, reason
        )

        async with self._reading():
            employee = await self.directory.get_employee(employee_id)

        async with self._transaction():
            application = await self.store.insert(
                LeaveApplication(
                    employee_id=employee.id,
                    leave_type=category,
                    start_date=start_date,
                    end_date=end_date,
                    days_requested=days_requested,
                    reason=reason or "",
                    status=LeaveStatus.PENDING.value,
                )
            )
            manager = await self.directory.get_manager_of(employee.id)

        logger.info(
            "Leave application %s submitted by employee %s (%s, %d day(s))",
            application.id,
            employee.id,
            category,
            days_requested,
        )

        if manager is None:
            logger.info(
                "Employee %s has no manager; no submission notice for application %s",
                employee.id,
                application.id,
            )
        else:
            await self._publish(submission_notice(application, employee, manager))
        return application

    async def approve(self, application_id: int, approver_id: int) -> LeaveApplication:
        """Approve a pending application and charge its days to the submitter."""
        async with self._reading():
            application, submitter, approver = await self._load_for_resolution(
                application_id, approver_id
            )
        days = application.days_requested

        async with self._transaction():
            flipped = await self.store.update_status(
                application_id,
                LeaveStatus.APPROVED,
                approver_id=approver.id,
                resolved_at=datetime.now(timezone.utc),
            )
            if not flipped:
                raise ConflictError(application_id)
            await self.ledger.record_consumption(submitter.id, days)
            application = await self.store.reload(application_id)

        logger.info(
            "Leave application %s approved by employee %s", application.id, approver.id
        )
        await self._publish(approval_notice(application, submitter, approver))
        return application

    async def reject(
        self,
        application_id: int,
        approver_id: int,
        rejection_reason: Optional[str] = None,
    ) -> LeaveApplication:
        """Reject a pending application. The ledger is not touched."""
        reason = (rejection_reason or "").strip() or None

        async with self._reading():
            application, submitter, approver = await self._load_for_resolution(
                application_id, approver_id
            )

        async with self._transaction():
            flipped = await self.store.update_status(
                application_id,
                LeaveStatus.REJECTED,
                approver_id=approver.id,
                resolved_at=datetime.now(timezone.utc),
                rejection_reason=reason,
            )
            if not flipped:
                raise ConflictError(application_id)
            application = await self.store.reload(application_id)

        logger.info(
            "Leave application %s rejected by employee %s", application.id, approver.id
        )
        await self._publish(rejection_notice(application, submitter, approver))
        return application

    # ── Queries ──────────────────────────────────────────────────────────

    async def get_application(self, application_id: int) -> LeaveApplication:
        async with self._reading():
            return await self.store.get_by_id(application_id)

    async def list_applications(
        self,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
    ) -> list[LeaveApplication]:
        async with self._reading():
            return await self.store.query(
                ApplicationFilter(employee_id=employee_id, manager_id=manager_id)
            )

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _validate_submission(
        leave_type: str,
        start_date: date,
        end_date: date,
        days_requested: int,
        reason: str,
    ) -> str:
        category = parse_leave_type(leave_type) if isinstance(leave_type, str) else None
        if category is None:
            raise ValidationError(
                f"Unknown leave type '{leave_type}'",
                details={"allowed": list(LEAVE_TYPES)},
            )
        if not isinstance(start_date, date) or not isinstance(end_date, date):
            raise ValidationError("start_date and end_date must be calendar dates")
        if start_date > end_date:
            raise ValidationError(
                f"start_date {start_date} is after end_date {end_date}"
            )
        if (
            isinstance(days_requested, bool)
            or not isinstance(days_requested, int)
            or days_requested <= 0
        ):
            raise ValidationError(
                f"days_requested must be a positive integer, got {days_requested!r}"
            )
        if reason is not None and not isinstance(reason, str):
            raise ValidationError("reason must be text")
        return category.value

    async def _load_for_resolution(
        self, application_id: int, approver_id: int
    ) -> tuple[LeaveApplication, Employee, Employee]:
        application = await self.store.get_by_id(application_id)
        if application.status != LeaveStatus.PENDING.value:
            raise ConflictError(application_id, application.status)

        approver = await self.directory.get_employee(approver_id)
        submitter = await self.directory.get_employee(application.employee_id)
        if not await self.approval_policy(self.directory, approver, submitter):
            raise PermissionDeniedError(
                f"Employee {approver.id} may not resolve leave requests "
                f"of employee {submitter.id}",
                details={"approver_id": approver.id, "submitter_id": submitter.id},
            )
        return application, submitter, approver

    async def _publish(self, notification: LeaveNotification) -> None:
        try:
            delivered = await self.notifier.publish(notification)
        except Exception:
            logger.exception(
                "Notification sink failed for '%s' notice of application %s",
                notification.kind,
                notification.application_id,
            )
            return
        if not delivered:
            logger.info(
                "'%s' notice for application %s was not delivered",
                notification.kind,
                notification.application_id,
            )
