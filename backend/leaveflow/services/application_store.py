"""Persistence for leave applications.

Status changes go through :meth:`LeaveApplicationStore.update_status`, a
compare-and-swap on ``status = 'pending'``. Of two concurrent resolutions of
the same application only one matches a row; the other sees ``False`` and the
caller reports a conflict.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from leaveflow.core.exceptions import NotFoundError
from leaveflow.models.employee import Employee
from leaveflow.models.leave_application import LeaveApplication
from leaveflow.models.leave_type import LeaveStatus


@dataclass(frozen=True)
class ApplicationFilter:
    employee_id: Optional[int] = None
    manager_id: Optional[int] = None


class LeaveApplicationStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, application: LeaveApplication) -> LeaveApplication:
        self.db.add(application)
        await self.db.flush()
        await self.db.refresh(application)
        return application

    async def find_by_id(self, application_id: int) -> Optional[LeaveApplication]:
        result = await self.db.execute(
            select(LeaveApplication)
            .where(LeaveApplication.id == application_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, application_id: int) -> LeaveApplication:
        application = await self.find_by_id(application_id)
        if application is None:
            raise NotFoundError("Leave application", application_id)
        return application

    async def update_status(
        self,
        application_id: int,
        new_status: LeaveStatus,
        approver_id: int,
        resolved_at: datetime,
        **extra: Any,
    ) -> bool:
        """Move a pending application to ``new_status``.

        Returns False when no pending row matched, i.e. the application is
        missing or was already resolved.
        """
        result = await self.db.execute(
            update(LeaveApplication)
            .where(
                LeaveApplication.id == application_id,
                LeaveApplication.status == LeaveStatus.PENDING.value,
            )
            .values(
                status=new_status.value,
                approved_by=approver_id,
                approved_at=resolved_at,
                **extra,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def reload(self, application_id: int) -> LeaveApplication:
        application = await self.db.get(
            LeaveApplication, application_id, populate_existing=True
        )
        if application is None:
            raise NotFoundError("Leave application", application_id)
        return application

    async def query(
        self, filters: Optional[ApplicationFilter] = None
    ) -> list[LeaveApplication]:
        """Most recent first; ties on ``created_at`` fall back to insertion order."""
        filters = filters or ApplicationFilter()
        query = select(LeaveApplication)
        if filters.employee_id is not None:
            query = query.where(LeaveApplication.employee_id == filters.employee_id)
        if filters.manager_id is not None:
            query = query.join(
                Employee, Employee.id == LeaveApplication.employee_id
            ).where(Employee.manager_id == filters.manager_id)

        query = query.order_by(
            LeaveApplication.created_at.desc(), LeaveApplication.id.asc()
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
