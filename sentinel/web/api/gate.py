"""Gate security API endpoints."""

from datetime import timedelta

from fastapi import APIRouter, HTTPException, status

from ...shared.db.models import (
    GateApprovalRequest,
    GateRequestStatus,
    Visitor,
    VisitorStatus,
    utcnow,
)
from ...shared.db.repositories import GateRequestRepository, VisitorRepository
from ...shared.schemas.common import DataEnvelope
from ...shared.schemas.gate import (
    GateDecision,
    GateDenial,
    GateRequestResponse,
    VisitorRegister,
    VisitorResponse,
)
from ..auth.dependencies import CurrentUser
from .deps import DbSession, Changes

router = APIRouter()


async def _get_request(repo: GateRequestRepository, request_id) -> GateApprovalRequest:
    gate_request = await repo.get_by_id(request_id)
    if not gate_request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gate request not found",
        )
    return gate_request


@router.post("/approve", response_model=DataEnvelope[GateRequestResponse])
async def approve_request(
    body: GateDecision,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """
    Approve a gate request.

    Approving an already approved request returns it unchanged.
    """
    repo = GateRequestRepository(db)
    gate_request = await _get_request(repo, body.request_id)

    if gate_request.status == GateRequestStatus.APPROVED:
        return DataEnvelope(data=GateRequestResponse.model_validate(gate_request))
    if gate_request.status == GateRequestStatus.DENIED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Gate request already denied",
        )

    gate_request.status = GateRequestStatus.APPROVED
    gate_request.approved_by = auth.email
    gate_request.approved_at = utcnow()
    await repo.update(gate_request)
    await db.commit()
    await changes.publish("gate_approval_requests", "update", gate_request.id)

    return DataEnvelope(data=GateRequestResponse.model_validate(gate_request))


@router.post("/deny", response_model=DataEnvelope[GateRequestResponse])
async def deny_request(
    body: GateDenial,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """
    Deny a gate request.
    """
    repo = GateRequestRepository(db)
    gate_request = await _get_request(repo, body.request_id)

    if gate_request.status == GateRequestStatus.DENIED:
        return DataEnvelope(data=GateRequestResponse.model_validate(gate_request))
    if gate_request.status == GateRequestStatus.APPROVED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Gate request already approved",
        )

    gate_request.status = GateRequestStatus.DENIED
    gate_request.approved_by = auth.email
    gate_request.approved_at = utcnow()
    gate_request.denial_reason = body.denial_reason
    await repo.update(gate_request)
    await db.commit()
    await changes.publish("gate_approval_requests", "update", gate_request.id)

    return DataEnvelope(data=GateRequestResponse.model_validate(gate_request))


@router.post(
    "/visitors/register",
    response_model=DataEnvelope[VisitorResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register_visitor(
    body: VisitorRegister,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """
    Sign a visitor in at the gate.
    """
    entry_time = utcnow()
    visitor = Visitor(
        **body.model_dump(exclude={"expected_duration_hours"}),
        entry_time=entry_time,
        expected_exit_time=entry_time + timedelta(hours=body.expected_duration_hours),
        approved_by=auth.email,
        status=VisitorStatus.ON_PREMISES,
    )
    visitor = await VisitorRepository(db).create(visitor)
    await db.commit()
    await changes.publish("visitor_registry", "insert", visitor.id)

    return DataEnvelope(data=VisitorResponse.model_validate(visitor))
