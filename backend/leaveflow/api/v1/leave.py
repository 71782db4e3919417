from typing import Optional

from fastapi import APIRouter, Depends, status

from leaveflow.core.dependencies import get_engine
from leaveflow.models.leave_type import LEAVE_TYPES
from leaveflow.schemas.leave import (
    LeaveApplicationCreate,
    LeaveApplicationListResponse,
    LeaveApplicationResponse,
    LeaveApprove,
    LeaveReject,
    LeaveTypesResponse,
)
from leaveflow.services.lifecycle import LeaveLifecycleEngine

router = APIRouter(prefix="/leave", tags=["leave"])


@router.get("/types", response_model=LeaveTypesResponse)
async def list_leave_types():
    """The fixed leave categories."""
    return LeaveTypesResponse(leave_types=list(LEAVE_TYPES))


@router.post(
    "/applications",
    response_model=LeaveApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_leave_application(
    data: LeaveApplicationCreate,
    engine: LeaveLifecycleEngine = Depends(get_engine),
):
    """Submit a leave application. The submitter's manager is notified."""
    return await engine.submit(
        employee_id=data.employee_id,
        leave_type=data.leave_type,
        start_date=data.start_date,
        end_date=data.end_date,
        days_requested=data.days_requested,
        reason=data.reason,
    )


@router.get("/applications", response_model=LeaveApplicationListResponse)
async def list_leave_applications(
    employee_id: Optional[int] = None,
    manager_id: Optional[int] = None,
    engine: LeaveLifecycleEngine = Depends(get_engine),
):
    """List applications, newest first. ``manager_id`` matches direct reports only."""
    applications = await engine.list_applications(
        employee_id=employee_id, manager_id=manager_id
    )
    return LeaveApplicationListResponse(items=applications, total=len(applications))


@router.get("/applications/{application_id}", response_model=LeaveApplicationResponse)
async def get_leave_application(
    application_id: int,
    engine: LeaveLifecycleEngine = Depends(get_engine),
):
    return await engine.get_application(application_id)


@router.post(
    "/applications/{application_id}/approve",
    response_model=LeaveApplicationResponse,
)
async def approve_leave_application(
    application_id: int,
    data: LeaveApprove,
    engine: LeaveLifecycleEngine = Depends(get_engine),
):
    """Approve a pending application and charge the days to the submitter."""
    return await engine.approve(application_id, data.approver_id)


@router.post(
    "/applications/{application_id}/reject",
    response_model=LeaveApplicationResponse,
)
async def reject_leave_application(
    application_id: int,
    data: LeaveReject,
    engine: LeaveLifecycleEngine = Depends(get_engine),
):
    """Reject a pending application."""
    return await engine.reject(
        application_id, data.approver_id, data.rejection_reason
    )
