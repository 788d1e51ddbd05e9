"""Leave request API endpoints."""

import math
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, status

from ...shared.db.models import LeaveApproval, ApprovalStatus
from ...shared.db.repositories import LeaveRepository
from ...shared.schemas.common import DataEnvelope
from ...shared.schemas.gate import LeaveCreate, LeaveResponse
from ..auth.dependencies import CurrentUser
from .deps import DbSession, Changes

router = APIRouter()


def leave_duration_hours(start: datetime, end: datetime) -> int:
    """Whole hours covered by the leave window, rounded up."""
    return math.ceil((end - start).total_seconds() / 3600)


@router.get("", response_model=DataEnvelope[List[LeaveResponse]])
async def list_leave(
    db: DbSession,
    status: Optional[ApprovalStatus] = None,
    student_id: Optional[str] = None,
):
    """
    List leave requests, newest first.
    """
    requests = await LeaveRepository(db).get_filtered(status=status, student_id=student_id)
    return DataEnvelope(data=[LeaveResponse.model_validate(r) for r in requests])


@router.post(
    "",
    response_model=DataEnvelope[LeaveResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_leave(
    body: LeaveCreate,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """
    Submit a leave request on behalf of a student.
    """
    leave = LeaveApproval(
        **body.model_dump(),
        requested_by=auth.email,
        duration_hours=leave_duration_hours(body.start_datetime, body.end_datetime),
    )
    leave = await LeaveRepository(db).create(leave)
    await db.commit()
    await changes.publish("leave_approvals", "insert", leave.id)

    return DataEnvelope(data=LeaveResponse.model_validate(leave))
