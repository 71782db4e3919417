import logging

import pytest

from leaveflow.core.exceptions import NotFoundError, ValidationError
from leaveflow.services.directory import EmployeeDirectory
from leaveflow.services.ledger import BalanceLedger, allotments_of, total_entitlement

pytestmark = pytest.mark.usefixtures("roster")


@pytest.fixture
def directory(db_session) -> EmployeeDirectory:
    return EmployeeDirectory(db_session)


@pytest.fixture
def ledger(directory) -> BalanceLedger:
    return BalanceLedger(directory)


async def test_entitlement_is_sum_of_allotments(directory):
    employee = await directory.get_employee(7)

    allotments = allotments_of(employee)
    assert allotments["Casual Leave"] == 12
    assert allotments["Earned Leave"] == 15
    assert allotments["Leave Without Pay"] == 0
    assert len(allotments) == 8
    assert total_entitlement(employee) == 54 == employee.leaves_entitled


async def test_snapshot_reports_remaining(directory, ledger):
    await ledger.record_consumption(8, 4)
    snapshot = ledger.snapshot(await directory.get_employee(8))

    assert snapshot.leaves_taken == 4
    assert snapshot.remaining == 50
    assert not snapshot.over_entitlement


async def test_record_consumption_accumulates(ledger):
    await ledger.record_consumption(9, 2)
    employee = await ledger.record_consumption(9, 3)
    assert employee.leaves_taken == 5


@pytest.mark.parametrize("days", [0, -2, 1.5, True, "3"])
async def test_record_consumption_rejects_non_positive_days(ledger, days):
    with pytest.raises(ValidationError):
        await ledger.record_consumption(9, days)


async def test_record_consumption_unknown_employee(ledger):
    with pytest.raises(NotFoundError):
        await ledger.record_consumption(404, 1)


async def test_over_entitlement_is_recorded_and_logged(directory, ledger, caplog):
    with caplog.at_level(logging.WARNING, logger="leaveflow.services.ledger"):
        employee = await ledger.record_consumption(10, 60)

    assert employee.leaves_taken == 60
    snapshot = ledger.snapshot(employee)
    assert snapshot.remaining == -6
    assert snapshot.over_entitlement
    assert "exceeds entitlement" in caplog.text
