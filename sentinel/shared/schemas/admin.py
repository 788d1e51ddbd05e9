"""Schemas for the admin views and server actions."""

from datetime import datetime
from typing import Optional, List, Literal, Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..db.models import ApprovalStatus, InterventionStatus, InsightStatus, LogSeverity
from .common import UTCDatetime


class TimetableCreate(BaseModel):
    """Create timetable period request schema."""
    template_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    day_of_week: int = Field(..., ge=0, le=6)
    period_number: int = Field(..., ge=0)
    period_name: str = Field(..., min_length=1, max_length=100)
    period_type: str = Field(..., min_length=1, max_length=50)
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}(:\d{2})?$")
    end_time: str = Field(..., pattern=r"^\d{2}:\d{2}(:\d{2})?$")


class TimetableResponse(BaseModel):
    id: UUID
    template_name: str
    description: Optional[str] = None
    day_of_week: int
    period_number: int
    period_name: str
    period_type: str
    start_time: str
    end_time: str

    model_config = ConfigDict(from_attributes=True)


class SpecialEventCreate(BaseModel):
    """Create special event request schema."""
    event_name: str = Field(..., min_length=1, max_length=255)
    event_type: str = Field(..., min_length=1, max_length=50)
    location: str = Field(..., min_length=1, max_length=255)
    start_datetime: UTCDatetime
    end_datetime: UTCDatetime
    description: Optional[str] = None
    participant_ids: List[str] = []
    created_by: Optional[str] = None


class SpecialEventResponse(BaseModel):
    id: UUID
    event_name: str
    event_type: str
    event_location: str
    start_datetime: datetime
    end_datetime: datetime
    participant_ids: Optional[List[Any]] = None
    participant_count: int
    created_by: str
    notes: Optional[str] = None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AbsenceDecision(BaseModel):
    """Approve or reject an absence request."""
    request_id: UUID
    decision: Literal["approve", "reject"]
    rejection_reason: Optional[str] = None


class AbsenceResponse(BaseModel):
    id: UUID
    student_id: str
    student_name: Optional[str] = None
    reason: str
    description: Optional[str] = None
    approval_status: ApprovalStatus
    submitted_at: datetime
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AnomalyAction(BaseModel):
    """Target of an anomaly resolve or escalate action."""
    anomaly_id: UUID


class FlaggedResolve(BaseModel):
    """Close the intervention on a flagged student."""
    flagged_id: UUID
    resolution_notes: Optional[str] = None


class FlaggedStudentResponse(BaseModel):
    id: UUID
    student_id: str
    student_name: Optional[str] = None
    flag_reason: Optional[str] = None
    absence_rate: Optional[float] = None
    intervention_status: InterventionStatus
    flagged_at: datetime
    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InsightResponse(BaseModel):
    id: UUID
    insight_type: str
    title: str
    description: Optional[str] = None
    severity: str
    status: InsightStatus
    detected_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SystemLogResponse(BaseModel):
    """Audit log row; ``details`` is the ``metadata`` column."""
    id: UUID
    log_type: str
    log_category: str
    message: str
    details: Optional[dict] = Field(
        None,
        validation_alias=AliasChoices("details", "metadata"),
        serialization_alias="metadata",
    )
    severity: LogSeverity
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AttendanceLogResponse(BaseModel):
    id: UUID
    user_id: str
    user_name: Optional[str] = None
    person_type: Optional[str] = None
    event_type: str
    camera_id: Optional[str] = None
    camera_name: Optional[str] = None
    attendance_status: Optional[str] = None
    confidence_score: Optional[float] = None
    capture_image_url: Optional[str] = None
    timestamp: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MovementResponse(BaseModel):
    id: UUID
    student_id: str
    student_name: Optional[str] = None
    movement_type: str
    location: Optional[str] = None
    return_confirmed: bool
    late_return: bool
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class WhereaboutsResponse(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    class_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("class_name", "class"),
        serialization_alias="class",
    )
    current_location: Optional[str] = None
    expected_location: Optional[str] = None
    location_match: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
