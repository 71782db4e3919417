"""Balance ledger.

Accounting view over an employee's leave counters. Entitlement is the sum of
the eight category allotments; consumption is one scalar (``leaves_taken``)
shared by every category. Consumption is never clamped to the entitlement:
crossing it is logged and recorded as-is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from leaveflow.core.exceptions import ValidationError
from leaveflow.models.employee import Employee
from leaveflow.models.leave_type import ALLOTMENT_COLUMNS

if TYPE_CHECKING:
    from leaveflow.services.directory import EmployeeDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    employee_id: int
    allotments: dict[str, int]
    leaves_entitled: int
    leaves_taken: int

    @property
    def remaining(self) -> int:
        return self.leaves_entitled - self.leaves_taken

    @property
    def over_entitlement(self) -> bool:
        return self.leaves_taken > self.leaves_entitled


def allotments_of(employee: Employee) -> dict[str, int]:
    """Map each leave category label to the employee's allotment."""
    return {
        leave_type.value: getattr(employee, column) or 0
        for leave_type, column in ALLOTMENT_COLUMNS.items()
    }


def total_entitlement(employee: Employee) -> int:
    return sum(allotments_of(employee).values())


class BalanceLedger:
    """Applies consumption to the directory's counters."""

    def __init__(self, directory: EmployeeDirectory):
        self.directory = directory

    def snapshot(self, employee: Employee) -> LedgerSnapshot:
        return LedgerSnapshot(
            employee_id=employee.id,
            allotments=allotments_of(employee),
            leaves_entitled=employee.leaves_entitled,
            leaves_taken=employee.leaves_taken,
        )

    async def record_consumption(self, employee_id: int, days: int) -> Employee:
        """Add ``days`` to the employee's consumed-leave counter.

        Runs inside the caller's transaction; the increment is a single SQL
        expression so concurrent approvals for one employee cannot lose an
        update.
        """
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise ValidationError(
                f"Consumed days must be a positive integer, got {days!r}"
            )

        employee = await self.directory.increment_leaves_taken(employee_id, days)
        if employee.leaves_taken > employee.leaves_entitled:
            logger.warning(
                "Employee %s consumption %d exceeds entitlement %d",
                employee.id,
                employee.leaves_taken,
                employee.leaves_entitled,
            )
        logger.info(
            "Recorded %d day(s) for employee %s (taken=%d, entitled=%d)",
            days,
            employee.id,
            employee.leaves_taken,
            employee.leaves_entitled,
        )
        return employee
