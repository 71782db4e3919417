from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class EmployeeCreate(BaseModel):
    full_name: str
    email: EmailStr
    role: str = "employee"
    manager_id: Optional[int] = None
    allotments: dict[str, int] = Field(default_factory=dict)


class AllotmentsUpdate(BaseModel):
    allotments: dict[str, int]


class ManagerUpdate(BaseModel):
    manager_id: Optional[int] = None


class LeavesTakenCorrection(BaseModel):
    leaves_taken: int = Field(..., ge=0)


class EmployeeResponse(BaseModel):
    id: int
    full_name: str
    email: str
    role: str
    manager_id: Optional[int] = None
    casual_leave: int
    sick_leave: int
    earned_leave: int
    privilege_leave: int
    maternity_leave: int
    paternity_leave: int
    compensatory_off: int
    leave_without_pay: int
    leaves_entitled: int
    leaves_taken: int
    created_at: datetime

    model_config = {"from_attributes": True}


class EmployeeListResponse(BaseModel):
    items: list[EmployeeResponse]
    total: int


class LeaveBalanceResponse(BaseModel):
    employee_id: int
    allotments: dict[str, int]
    leaves_entitled: int
    leaves_taken: int
    remaining: int
    over_entitlement: bool
