import pytest

from leaveflow.core.exceptions import NotFoundError, ValidationError
from leaveflow.services.directory import EmployeeDirectory


@pytest.fixture
def directory(db_session) -> EmployeeDirectory:
    return EmployeeDirectory(db_session)


async def test_add_employee_normalises_email_and_computes_entitlement(directory):
    boss = await directory.add_employee("Ada Boss", "ADA@Example.com", role="owner")
    worker = await directory.add_employee(
        "Bo Worker",
        "bo@example.com",
        manager_id=boss.id,
        allotments={"Casual Leave": 10, "Sick Leave": 5},
    )

    assert boss.email == "ada@example.com"
    assert boss.manager_id is None
    assert boss.leaves_entitled == 0
    assert worker.manager_id == boss.id
    assert worker.casual_leave == 10
    assert worker.sick_leave == 5
    assert worker.earned_leave == 0
    assert worker.leaves_entitled == 15
    assert worker.leaves_taken == 0


async def test_add_employee_validation(directory):
    await directory.add_employee("Ada", "ada@example.com")

    with pytest.raises(ValidationError):
        await directory.add_employee("Ada Again", "ada@EXAMPLE.com")
    with pytest.raises(ValidationError):
        await directory.add_employee("", "blank@example.com")
    with pytest.raises(ValidationError):
        await directory.add_employee("No At", "not-an-email")
    with pytest.raises(ValidationError):
        await directory.add_employee("Ceo", "ceo@example.com", role="ceo")
    with pytest.raises(NotFoundError):
        await directory.add_employee("Orphan", "orphan@example.com", manager_id=77)


@pytest.mark.usefixtures("roster")
async def test_get_manager_of(directory):
    manager = await directory.get_manager_of(5)
    assert manager.id == 4
    assert manager.email == "rajesh@soenaudio.com"

    assert await directory.get_manager_of(1) is None

    with pytest.raises(NotFoundError):
        await directory.get_manager_of(99)


@pytest.mark.usefixtures("roster")
async def test_set_allotments_recomputes_entitlement(directory):
    employee = await directory.set_allotments(
        5, {"Maternity Leave": 0, "Paternity Leave": 10, "Compensatory Off": 2}
    )

    # seeded: 12 casual + 12 sick + 15 earned + 15 privilege
    assert employee.paternity_leave == 10
    assert employee.compensatory_off == 2
    assert employee.leaves_entitled == 54 + 12


@pytest.mark.usefixtures("roster")
@pytest.mark.parametrize(
    "allotments",
    [{"Vacation": 3}, {"Sick Leave": -1}, {"Sick Leave": 1.5}, {"Sick Leave": True}],
)
async def test_set_allotments_rejects_bad_values(directory, allotments):
    with pytest.raises(ValidationError):
        await directory.set_allotments(5, allotments)


@pytest.mark.usefixtures("roster")
async def test_set_manager_prevents_cycles(directory):
    # Hari(1) -> Rajesh(4) -> Sanket(5)
    with pytest.raises(ValidationError):
        await directory.set_manager(1, 5)
    with pytest.raises(ValidationError):
        await directory.set_manager(4, 4)
    with pytest.raises(NotFoundError):
        await directory.set_manager(4, 404)

    moved = await directory.set_manager(5, 2)
    assert moved.manager_id == 2
    promoted = await directory.set_manager(4, None)
    assert promoted.manager_id is None


@pytest.mark.usefixtures("roster")
async def test_is_in_manager_chain(directory):
    assert await directory.is_in_manager_chain(4, 5)
    assert await directory.is_in_manager_chain(1, 5)
    assert not await directory.is_in_manager_chain(2, 5)
    assert not await directory.is_in_manager_chain(5, 4)
    assert not await directory.is_in_manager_chain(5, 5)


@pytest.mark.usefixtures("roster")
async def test_increment_and_correct_leaves_taken(directory):
    employee = await directory.increment_leaves_taken(6, 3)
    assert employee.leaves_taken == 3
    employee = await directory.increment_leaves_taken(6, 2)
    assert employee.leaves_taken == 5

    corrected = await directory.correct_leaves_taken(6, 1)
    assert corrected.leaves_taken == 1

    with pytest.raises(ValidationError):
        await directory.correct_leaves_taken(6, -1)
    with pytest.raises(NotFoundError):
        await directory.increment_leaves_taken(404, 1)
    with pytest.raises(NotFoundError):
        await directory.correct_leaves_taken(404, 0)


@pytest.mark.usefixtures("roster")
async def test_list_employees_in_id_order(directory):
    employees = await directory.list_employees()
    assert [e.id for e in employees] == list(range(1, 14))


async def test_add_employee_concurrent_duplicate_is_a_validation_error(directory, monkeypatch):
    await directory.add_employee("Ada", "ada@example.com")

    # both writers passed the lookup before either inserted
    async def not_taken(self, email):
        return False

    monkeypatch.setattr(EmployeeDirectory, "_email_taken", not_taken)

    with pytest.raises(ValidationError, match="already exists"):
        await directory.add_employee("Ada Twin", "ADA@example.com")
