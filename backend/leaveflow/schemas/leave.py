from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class LeaveApplicationCreate(BaseModel):
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    days_requested: int = Field(..., gt=0)
    reason: str = ""


class LeaveApprove(BaseModel):
    approver_id: int


class LeaveReject(BaseModel):
    approver_id: int
    rejection_reason: Optional[str] = None


class LeaveApplicationResponse(BaseModel):
    id: int
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    days_requested: int
    reason: str
    status: str
    approved_by: Optional[int] = None
    rejection_reason: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class LeaveApplicationListResponse(BaseModel):
    items: list[LeaveApplicationResponse]
    total: int


class LeaveTypesResponse(BaseModel):
    leave_types: list[str]
