"""Anomaly schemas."""

from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..db.models import Severity, AnomalyStatus
from .common import UTCDatetime


class AnomalyCreate(BaseModel):
    """Create anomaly request schema."""
    type: str = Field(..., min_length=1, max_length=50)
    severity: Severity = Severity.WARNING
    status: AnomalyStatus = AnomalyStatus.ACTIVE
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

    student_id: Optional[str] = None
    student_name: Optional[str] = None
    student_class: Optional[str] = None

    camera_name: Optional[str] = None
    expected_location: Optional[str] = None
    actual_location: Optional[str] = None
    last_seen_location: Optional[str] = None

    detected_at: Optional[UTCDatetime] = None


class AnomalyResponse(BaseModel):
    """Anomaly response schema."""
    id: UUID
    type: str
    severity: Severity
    status: AnomalyStatus
    title: str
    description: Optional[str] = None

    student_id: Optional[str] = None
    student_name: Optional[str] = None
    student_class: Optional[str] = None

    camera_name: Optional[str] = None
    expected_location: Optional[str] = None
    actual_location: Optional[str] = None
    last_seen_location: Optional[str] = None

    intervention_type: Optional[str] = None
    intervention_at: Optional[datetime] = None
    intervention_by: Optional[str] = None

    detected_at: datetime
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SeverityGroups(BaseModel):
    """Active anomalies split by severity tier."""
    critical: List[AnomalyResponse] = []
    warning: List[AnomalyResponse] = []
    watchlist: List[AnomalyResponse] = []
