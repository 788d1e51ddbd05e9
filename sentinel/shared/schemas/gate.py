"""Gate, visitor and leave schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ..db.models import GateRequestStatus, VisitorStatus, ApprovalStatus
from .common import UTCDatetime


class GateDecision(BaseModel):
    """Approve a gate request."""
    request_id: UUID


class GateDenial(BaseModel):
    """Deny a gate request."""
    request_id: UUID
    denial_reason: Optional[str] = None


class GateRequestResponse(BaseModel):
    """Gate approval request response schema."""
    id: UUID
    person_id: Optional[str] = None
    person_name: str
    request_type: str
    reason: Optional[str] = None
    urgency: str
    status: GateRequestStatus
    requested_at: datetime
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    denial_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class GateTransactionResponse(BaseModel):
    id: UUID
    person_id: Optional[str] = None
    person_name: str
    transaction_type: str
    gate: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class VisitorRegister(BaseModel):
    """Register a visitor at the gate."""
    full_name: str = Field(..., min_length=1, max_length=255)
    id_number: Optional[str] = None
    phone_number: Optional[str] = None
    company_organization: Optional[str] = None
    purpose: str = Field(..., min_length=1)
    host_staff_name: Optional[str] = None
    expected_duration_hours: float = Field(default=2, gt=0, le=24)
    entry_gate: str = "Main Gate"


class VisitorResponse(BaseModel):
    """Visitor response schema."""
    id: UUID
    full_name: str
    id_number: Optional[str] = None
    phone_number: Optional[str] = None
    company_organization: Optional[str] = None
    purpose: str
    host_staff_name: Optional[str] = None
    entry_time: datetime
    expected_exit_time: Optional[datetime] = None
    actual_exit_time: Optional[datetime] = None
    approved_by: Optional[str] = None
    entry_gate: str
    status: VisitorStatus

    model_config = ConfigDict(from_attributes=True)


class LeaveCreate(BaseModel):
    """Create leave request schema."""
    student_id: str = Field(..., min_length=1)
    student_name: Optional[str] = None
    class_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("class_name", "class")
    )
    leave_type: str = "weekend_home"
    leave_reason: Optional[str] = None
    start_datetime: UTCDatetime
    end_datetime: UTCDatetime

    guardian_name: Optional[str] = None
    guardian_id_number: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_relationship: Optional[str] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.end_datetime <= self.start_datetime:
            raise ValueError("end_datetime must be after start_datetime")
        return self


class LeaveResponse(BaseModel):
    """Leave request response schema."""
    id: UUID
    student_id: str
    student_name: Optional[str] = None
    class_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("class_name", "class"),
        serialization_alias="class",
    )
    leave_type: str
    leave_reason: Optional[str] = None
    start_datetime: datetime
    end_datetime: datetime
    duration_hours: int

    guardian_name: Optional[str] = None
    guardian_id_number: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_relationship: Optional[str] = None

    requested_by: Optional[str] = None
    requested_at: datetime
    approval_status: ApprovalStatus
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    exit_confirmed: bool

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
