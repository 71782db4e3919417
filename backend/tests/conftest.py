import os

# Settings are read at import time; keep tests off real databases and mail providers.
for key, value in (
    ("DATABASE_URL", "sqlite+aiosqlite:///:memory:"),
    ("SENDGRID_API_KEY", ""),
    ("SMTP_USER", ""),
    ("SMTP_PASSWORD", ""),
    ("APPROVAL_POLICY", "any"),
):
    os.environ[key] = value

from typing import AsyncIterator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import seed
from leaveflow.core.database import Base
from leaveflow.core.dependencies import get_db, get_notifier
from leaveflow.main import app
from leaveflow.models import Employee, LeaveApplication
from leaveflow.services.lifecycle import LeaveLifecycleEngine
from leaveflow.services.notifications import LeaveNotification


class RecordingNotifier:
    """Notification sink that keeps everything it is given."""

    def __init__(self, deliver: bool = True):
        self.deliver = deliver
        self.published: list[LeaveNotification] = []

    async def publish(self, notification: LeaveNotification) -> bool:
        self.published.append(notification)
        return self.deliver


@pytest.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'leave.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def roster(session_factory, monkeypatch) -> None:
    """The 13-person SOEN roster; directory ids match the roster ids."""
    monkeypatch.setattr(seed, "async_session_factory", session_factory)
    await seed.seed()


@pytest.fixture
def engine(db_session, notifier) -> LeaveLifecycleEngine:
    return LeaveLifecycleEngine(db_session, notifier)


@pytest.fixture
def fetch_employee(session_factory):
    """Read an employee through a fresh session, bypassing any identity map."""

    async def _fetch(employee_id: int) -> Employee:
        async with session_factory() as session:
            return await session.get(Employee, employee_id)

    return _fetch


@pytest.fixture
def fetch_application(session_factory):
    """Read an application through a fresh session."""

    async def _fetch(application_id: int) -> LeaveApplication:
        async with session_factory() as session:
            return await session.get(LeaveApplication, application_id)

    return _fetch


@pytest.fixture
async def client(session_factory, notifier) -> AsyncIterator[httpx.AsyncClient]:
    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
