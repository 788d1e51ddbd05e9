"""Server actions behind the admin forms.

Actions never raise: every outcome comes back as an ``ActionResponse``.
"""

import logging
from typing import Awaitable, Callable

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core import ChangeFeed
from ...shared.db.models import (
    ApprovalStatus,
    CameraMetadata,
    InterventionStatus,
    SpecialEvent,
    TimetableTemplate,
    utcnow,
)
from ...shared.db.repositories import (
    AbsenceRequestRepository,
    AnomalyRepository,
    CameraRepository,
    FlaggedStudentRepository,
    SpecialEventRepository,
    TimetableRepository,
)
from ...shared.schemas.admin import (
    AbsenceDecision,
    AbsenceResponse,
    AnomalyAction,
    FlaggedResolve,
    FlaggedStudentResponse,
    SpecialEventCreate,
    SpecialEventResponse,
    TimetableCreate,
    TimetableResponse,
)
from ...shared.schemas.anomaly import AnomalyResponse
from ...shared.schemas.camera import CameraRegister, CameraResponse
from ...shared.schemas.common import ActionResponse
from ..auth.dependencies import CurrentUser
from .deps import DbSession, Changes

logger = logging.getLogger(__name__)

router = APIRouter()

UNEXPECTED = "An unexpected error occurred"


async def run_action(
    db: AsyncSession,
    changes: ChangeFeed,
    table: str,
    operation: str,
    failure_message: str,
    write: Callable[[], Awaitable[ActionResponse]],
) -> ActionResponse:
    """Run one write, commit it and announce the change.

    Backend errors are rolled back and reported in the response.
    """
    try:
        response = await write()
        if not response.success:
            return response
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("%s: %s", failure_message, e)
        return ActionResponse.failed(failure_message, e)

    row_id = response.data.get("id") if isinstance(response.data, dict) else None
    await changes.publish(table, operation, row_id)
    return response


def _data(schema, row) -> dict:
    return schema.model_validate(row).model_dump(mode="json", by_alias=True)


def _not_found(what: str) -> ActionResponse:
    return ActionResponse.failed(f"{what} not found", "not_found")


@router.post("/timetables", response_model=ActionResponse)
async def create_timetable_template(
    body: TimetableCreate,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    async def write():
        template = await TimetableRepository(db).create(TimetableTemplate(**body.model_dump()))
        return ActionResponse.ok(
            "Timetable template created successfully",
            _data(TimetableResponse, template),
        )

    return await run_action(
        db, changes, "timetable_template", "insert",
        "Failed to create timetable template", write,
    )


@router.post("/special-events", response_model=ActionResponse)
async def create_special_event(
    body: SpecialEventCreate,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """Create a special event; the form's location and description map to
    ``event_location`` and ``notes``."""
    async def write():
        event = await SpecialEventRepository(db).create(SpecialEvent(
            event_name=body.event_name,
            event_type=body.event_type,
            event_location=body.location,
            start_datetime=body.start_datetime,
            end_datetime=body.end_datetime,
            participant_ids=body.participant_ids,
            participant_count=len(body.participant_ids),
            created_by=body.created_by or auth.email or auth.user_id,
            notes=body.description,
        ))
        return ActionResponse.ok(
            "Special event created successfully",
            _data(SpecialEventResponse, event),
        )

    return await run_action(
        db, changes, "special_events", "insert",
        "Failed to create special event", write,
    )


@router.post("/cameras", response_model=ActionResponse)
async def register_camera(
    body: CameraRegister,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    async def write():
        repo = CameraRepository(db)
        if await repo.get_by_device_id(body.device_id):
            return ActionResponse.failed(
                "Failed to register camera", f"Camera {body.device_id} is already registered",
            )
        camera = await repo.create(CameraMetadata(**body.model_dump()))
        return ActionResponse.ok("Camera registered successfully", _data(CameraResponse, camera))

    return await run_action(
        db, changes, "camera_metadata", "insert",
        "Failed to register camera", write,
    )


@router.post("/absence-requests/decide", response_model=ActionResponse)
async def decide_absence_request(
    body: AbsenceDecision,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """Approve or reject an absence request."""
    async def write():
        repo = AbsenceRequestRepository(db)
        request = await repo.get_by_id(body.request_id)
        if not request:
            return _not_found("Absence request")

        if body.decision == "approve":
            request.approval_status = ApprovalStatus.APPROVED
        else:
            request.approval_status = ApprovalStatus.REJECTED
            request.rejection_reason = body.rejection_reason
        request.approved_by = auth.email
        request.approved_at = utcnow()
        request = await repo.update(request)
        return ActionResponse.ok(
            f"Absence request {request.approval_status.value}",
            _data(AbsenceResponse, request),
        )

    return await run_action(
        db, changes, "absence_reasons", "update",
        "Failed to update absence request", write,
    )


@router.post("/anomalies/resolve", response_model=ActionResponse)
async def resolve_anomaly(
    body: AnomalyAction,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    async def write():
        repo = AnomalyRepository(db)
        anomaly = await repo.get_by_id(body.anomaly_id)
        if not anomaly:
            return _not_found("Anomaly")
        anomaly = await repo.resolve(anomaly)
        return ActionResponse.ok("Anomaly resolved", _data(AnomalyResponse, anomaly))

    return await run_action(db, changes, "anomalies", "update", UNEXPECTED, write)


@router.post("/anomalies/escalate", response_model=ActionResponse)
async def escalate_anomaly(
    body: AnomalyAction,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    async def write():
        repo = AnomalyRepository(db)
        anomaly = await repo.get_by_id(body.anomaly_id)
        if not anomaly:
            return _not_found("Anomaly")
        anomaly = await repo.escalate(anomaly)
        return ActionResponse.ok("Anomaly escalated", _data(AnomalyResponse, anomaly))

    return await run_action(db, changes, "anomalies", "update", UNEXPECTED, write)


@router.post("/flagged-students/resolve", response_model=ActionResponse)
async def resolve_flagged_student(
    body: FlaggedResolve,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    async def write():
        repo = FlaggedStudentRepository(db)
        flagged = await repo.get_by_id(body.flagged_id)
        if not flagged:
            return _not_found("Flagged student")
        flagged.intervention_status = InterventionStatus.RESOLVED
        flagged.resolved_at = utcnow()
        flagged.resolution_notes = body.resolution_notes
        flagged = await repo.update(flagged)
        return ActionResponse.ok(
            "Intervention resolved",
            _data(FlaggedStudentResponse, flagged),
        )

    return await run_action(
        db, changes, "flagged_students", "update",
        "Failed to resolve flagged student", write,
    )
