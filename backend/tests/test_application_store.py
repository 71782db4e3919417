from datetime import date, datetime, timedelta, timezone

import pytest

from leaveflow.core.exceptions import NotFoundError
from leaveflow.models import LeaveApplication, LeaveStatus
from leaveflow.services.application_store import ApplicationFilter, LeaveApplicationStore

pytestmark = pytest.mark.usefixtures("roster")

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(db_session) -> LeaveApplicationStore:
    return LeaveApplicationStore(db_session)


def _application(employee_id: int, created_at: datetime | None = None) -> LeaveApplication:
    application = LeaveApplication(
        employee_id=employee_id,
        leave_type="Casual Leave",
        start_date=date(2024, 4, 1),
        end_date=date(2024, 4, 2),
        days_requested=2,
        reason="errands",
    )
    if created_at is not None:
        application.created_at = created_at
    return application


async def test_insert_assigns_id_and_defaults(store):
    application = await store.insert(_application(5))

    assert application.id is not None
    assert application.status == LeaveStatus.PENDING.value
    assert application.created_at is not None

    fetched = await store.get_by_id(application.id)
    assert fetched.employee_id == 5


async def test_get_by_id_missing(store):
    assert await store.find_by_id(9) is None
    with pytest.raises(NotFoundError):
        await store.get_by_id(9)


async def test_update_status_only_moves_pending_rows(store):
    application = await store.insert(_application(5))

    assert await store.update_status(
        application.id, LeaveStatus.REJECTED, approver_id=4, resolved_at=T0,
        rejection_reason="no cover",
    )
    assert not await store.update_status(
        application.id, LeaveStatus.APPROVED, approver_id=4, resolved_at=T0
    )
    assert not await store.update_status(
        404, LeaveStatus.APPROVED, approver_id=4, resolved_at=T0
    )

    stored = await store.reload(application.id)
    assert stored.status == "rejected"
    assert stored.rejection_reason == "no cover"
    assert stored.approved_by == 4


async def test_query_orders_newest_first_and_breaks_ties_by_insertion(store):
    oldest = await store.insert(_application(5, created_at=T0))
    tie_first = await store.insert(_application(6, created_at=T0 + timedelta(hours=1)))
    tie_second = await store.insert(_application(12, created_at=T0 + timedelta(hours=1)))
    newest = await store.insert(_application(4, created_at=T0 + timedelta(days=1)))

    ids = [a.id for a in await store.query()]
    assert ids == [newest.id, tie_first.id, tie_second.id, oldest.id]

    # restartable: a second read yields the same sequence
    assert [a.id for a in await store.query(ApplicationFilter())] == ids


async def test_query_by_manager_is_one_hop(store):
    await store.insert(_application(5))  # reports to 4
    await store.insert(_application(12))  # reports to 2
    rajesh = await store.insert(_application(4))  # reports to 1

    by_hari = await store.query(ApplicationFilter(manager_id=1))
    assert [a.id for a in by_hari] == [rajesh.id]

    by_daniel = await store.query(ApplicationFilter(manager_id=2))
    assert [a.employee_id for a in by_daniel] == [12]

    assert await store.query(ApplicationFilter(manager_id=13)) == []
