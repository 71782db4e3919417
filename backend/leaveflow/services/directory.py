"""Employee directory backed by the ``employees`` table.

Holds the manager tree and the leave counters the ledger reads and updates.
Methods flush but never commit; the caller owns the transaction.
"""

from collections.abc import Mapping
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leaveflow.core.exceptions import NotFoundError, ValidationError
from leaveflow.models.employee import Employee
from leaveflow.models.leave_type import ALLOTMENT_COLUMNS, parse_leave_type
from leaveflow.services.ledger import total_entitlement

EMPLOYEE_ROLES = ("owner", "admin", "employee")


def _check_count(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer, got {value!r}")
    return value


class EmployeeDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_employee(self, employee_id: int) -> Optional[Employee]:
        result = await self.db.execute(
            select(Employee)
            .where(Employee.id == employee_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_employee(self, employee_id: int) -> Employee:
        employee = await self.find_employee(employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def get_manager_of(self, employee_id: int) -> Optional[Employee]:
        """Return the employee's direct manager, or None for top-level roles."""
        employee = await self.get_employee(employee_id)
        if employee.manager_id is None:
            return None
        return await self.find_employee(employee.manager_id)

    async def list_employees(self) -> list[Employee]:
        result = await self.db.execute(select(Employee).order_by(Employee.id))
        return list(result.scalars().all())

    async def add_employee(
        self,
        full_name: str,
        email: str,
        role: str = "employee",
        manager_id: Optional[int] = None,
        allotments: Optional[Mapping[str, int]] = None,
    ) -> Employee:
        full_name = (full_name or "").strip()
        email = (email or "").strip().lower()
        if not full_name:
            raise ValidationError("full_name is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email address: {email!r}")
        if role not in EMPLOYEE_ROLES:
            raise ValidationError(
                f"Unknown role '{role}'. Expected one of: {', '.join(EMPLOYEE_ROLES)}"
            )

        if await self._email_taken(email):
            raise ValidationError(f"Employee with email {email} already exists")
        if manager_id is not None:
            await self.get_employee(manager_id)

        employee = Employee(
            full_name=full_name,
            email=email,
            role=role,
            manager_id=manager_id,
            leaves_taken=0,
        )
        for column in ALLOTMENT_COLUMNS.values():
            setattr(employee, column, 0)
        self._apply_allotments(employee, allotments or {})

        self.db.add(employee)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # lost a race with a concurrent insert of the same address
            raise ValidationError(f"Employee with email {email} already exists") from e
        await self.db.refresh(employee)
        return employee

    async def _email_taken(self, email: str) -> bool:
        existing = await self.db.execute(
            select(Employee.id).where(func.lower(Employee.email) == email)
        )
        return existing.scalar_one_or_none() is not None

    async def set_allotments(
        self, employee_id: int, allotments: Mapping[str, int]
    ) -> Employee:
        """Update some or all category allotments and recompute the entitlement."""
        employee = await self.get_employee(employee_id)
        self._apply_allotments(employee, allotments)
        await self.db.flush()
        await self.db.refresh(employee)
        return employee

    @staticmethod
    def _apply_allotments(employee: Employee, allotments: Mapping[str, int]) -> None:
        changes: dict[str, int] = {}
        for label, days in allotments.items():
            leave_type = parse_leave_type(label)
            if leave_type is None:
                raise ValidationError(f"Unknown leave type '{label}'")
            changes[ALLOTMENT_COLUMNS[leave_type]] = _check_count(label, days)

        for column, days in changes.items():
            setattr(employee, column, days)
        employee.leaves_entitled = total_entitlement(employee)

    async def set_manager(
        self, employee_id: int, manager_id: Optional[int]
    ) -> Employee:
        employee = await self.get_employee(employee_id)
        if manager_id is not None:
            if manager_id == employee_id:
                raise ValidationError("An employee cannot manage themselves")
            await self.get_employee(manager_id)
            if await self.is_in_manager_chain(employee_id, manager_id):
                raise ValidationError(
                    f"Assigning manager {manager_id} to employee {employee_id} "
                    "would create a reporting cycle"
                )

        employee.manager_id = manager_id
        await self.db.flush()
        await self.db.refresh(employee)
        return employee

    async def is_in_manager_chain(self, ancestor_id: int, employee_id: int) -> bool:
        """True if ``ancestor_id`` sits above ``employee_id`` in the manager tree."""
        seen: set[int] = {employee_id}
        current = await self.get_employee(employee_id)
        while current.manager_id is not None and current.manager_id not in seen:
            if current.manager_id == ancestor_id:
                return True
            seen.add(current.manager_id)
            manager = await self.find_employee(current.manager_id)
            if manager is None:
                return False
            current = manager
        return False

    async def increment_leaves_taken(self, employee_id: int, days: int) -> Employee:
        result = await self.db.execute(
            update(Employee)
            .where(Employee.id == employee_id)
            .values(leaves_taken=Employee.leaves_taken + days)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Employee", employee_id)
        return await self._reload(employee_id)

    async def correct_leaves_taken(self, employee_id: int, leaves_taken: int) -> Employee:
        """Administrative override of the consumed-leave counter."""
        _check_count("leaves_taken", leaves_taken)
        result = await self.db.execute(
            update(Employee)
            .where(Employee.id == employee_id)
            .values(leaves_taken=leaves_taken)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Employee", employee_id)
        return await self._reload(employee_id)

    async def _reload(self, employee_id: int) -> Employee:
        employee = await self.db.get(Employee, employee_id, populate_existing=True)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee
