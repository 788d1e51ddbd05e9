"""Anomalies API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...shared.db.models import Anomaly, AnomalyStatus, Severity
from ...shared.db.repositories import AnomalyRepository
from ...shared.schemas.anomaly import AnomalyCreate, AnomalyResponse, SeverityGroups
from ...shared.schemas.common import DataEnvelope
from ...core.aggregation import partition_by_severity
from .deps import DbSession, Changes

router = APIRouter()


@router.get("", response_model=DataEnvelope[List[AnomalyResponse]])
async def list_anomalies(
    db: DbSession,
    status: AnomalyStatus = AnomalyStatus.ACTIVE,
    severity: Optional[Severity] = None,
    limit: int = Query(default=50, ge=1, le=500),
):
    """
    List anomalies, newest first.
    """
    anomalies = await AnomalyRepository(db).get_filtered(
        status=status,
        severity=severity,
        limit=limit,
    )
    return DataEnvelope(data=[AnomalyResponse.model_validate(a) for a in anomalies])


@router.post(
    "",
    response_model=DataEnvelope[AnomalyResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_anomaly(
    body: AnomalyCreate,
    db: DbSession,
    changes: Changes,
):
    """
    Record a new anomaly.
    """
    anomaly = await AnomalyRepository(db).create(
        Anomaly(**body.model_dump(exclude_none=True))
    )
    await db.commit()
    await changes.publish("anomalies", "insert", anomaly.id)

    return DataEnvelope(data=AnomalyResponse.model_validate(anomaly))


@router.get("/active", response_model=DataEnvelope[SeverityGroups])
async def get_active_anomalies(db: DbSession):
    """
    Active anomalies grouped by severity tier.
    """
    anomalies = await AnomalyRepository(db).get_active()
    groups = partition_by_severity(
        AnomalyResponse.model_validate(a) for a in anomalies
    )
    return DataEnvelope(data=SeverityGroups(**groups))
