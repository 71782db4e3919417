from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leaveflow.core.config import settings
from leaveflow.core.database import async_session_factory
from leaveflow.services.approval_policy import ApprovalPolicy, get_approval_policy
from leaveflow.services.directory import EmployeeDirectory
from leaveflow.services.lifecycle import LeaveLifecycleEngine
from leaveflow.services.notifications import NotificationSink, notification_dispatcher


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_notifier() -> NotificationSink:
    return notification_dispatcher


def get_policy() -> ApprovalPolicy:
    return get_approval_policy(settings.APPROVAL_POLICY)


def get_directory(db: AsyncSession = Depends(get_db)) -> EmployeeDirectory:
    return EmployeeDirectory(db)


def get_engine(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
    policy: ApprovalPolicy = Depends(get_policy),
) -> LeaveLifecycleEngine:
    return LeaveLifecycleEngine(db, notifier, approval_policy=policy)
