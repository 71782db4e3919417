from fastapi import APIRouter, Depends, status

from leaveflow.core.dependencies import get_directory
from leaveflow.schemas.employees import (
    AllotmentsUpdate,
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    LeaveBalanceResponse,
    LeavesTakenCorrection,
    ManagerUpdate,
)
from leaveflow.services.directory import EmployeeDirectory
from leaveflow.services.ledger import BalanceLedger

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    directory: EmployeeDirectory = Depends(get_directory),
):
    """List the employee roster."""
    employees = await directory.list_employees()
    return EmployeeListResponse(items=employees, total=len(employees))


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate,
    directory: EmployeeDirectory = Depends(get_directory),
):
    """Add an employee to the roster."""
    return await directory.add_employee(
        full_name=data.full_name,
        email=data.email,
        role=data.role,
        manager_id=data.manager_id,
        allotments=data.allotments,
    )


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: int,
    directory: EmployeeDirectory = Depends(get_directory),
):
    return await directory.get_employee(employee_id)


@router.get("/{employee_id}/balance", response_model=LeaveBalanceResponse)
async def get_leave_balance(
    employee_id: int,
    directory: EmployeeDirectory = Depends(get_directory),
):
    """Allotments per category against the single consumed-leave counter."""
    employee = await directory.get_employee(employee_id)
    snapshot = BalanceLedger(directory).snapshot(employee)
    return LeaveBalanceResponse(
        employee_id=snapshot.employee_id,
        allotments=snapshot.allotments,
        leaves_entitled=snapshot.leaves_entitled,
        leaves_taken=snapshot.leaves_taken,
        remaining=snapshot.remaining,
        over_entitlement=snapshot.over_entitlement,
    )


@router.put("/{employee_id}/allotments", response_model=EmployeeResponse)
async def update_allotments(
    employee_id: int,
    data: AllotmentsUpdate,
    directory: EmployeeDirectory = Depends(get_directory),
):
    """Set category allotments; the entitlement is recomputed."""
    return await directory.set_allotments(employee_id, data.allotments)


@router.put("/{employee_id}/manager", response_model=EmployeeResponse)
async def update_manager(
    employee_id: int,
    data: ManagerUpdate,
    directory: EmployeeDirectory = Depends(get_directory),
):
    return await directory.set_manager(employee_id, data.manager_id)


@router.put("/{employee_id}/leaves-taken", response_model=EmployeeResponse)
async def correct_leaves_taken(
    employee_id: int,
    data: LeavesTakenCorrection,
    directory: EmployeeDirectory = Depends(get_directory),
):
    """Administrative correction of the consumed-leave counter."""
    return await directory.correct_leaves_taken(employee_id, data.leaves_taken)
