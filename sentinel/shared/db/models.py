"""SQLAlchemy ORM mapping of the school operations tables.

The tables belong to the managed database; this module only declares the
columns the dashboard reads and writes.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    String,
    Text,
    Integer,
    Float,
    Boolean,
    DateTime,
    ForeignKey,
    Enum,
    JSON,
    Uuid,
    Index,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the store's timestamp columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def _enum(enum_cls):
    """Text-backed enum column restricted to the known values."""
    return Enum(
        enum_cls,
        values_callable=lambda x: [e.value for e in x],
        native_enum=False,
        validate_strings=True,
        length=32,
    )


# Enums

class PersonType(str, PyEnum):
    """Kind of person in the registry."""
    STUDENT = "student"
    STAFF = "staff"
    VISITOR = "visitor"


class PresenceStatus(str, PyEnum):
    """Where a person currently is."""
    ON_CAMPUS = "on_campus"
    OFF_CAMPUS = "off_campus"
    MEDICAL_LEAVE = "medical_leave"
    UNKNOWN = "unknown"


class Severity(str, PyEnum):
    """Anomaly severity tier."""
    CRITICAL = "critical"
    WARNING = "warning"
    WATCHLIST = "watchlist"


class AnomalyStatus(str, PyEnum):
    """Anomaly lifecycle state."""
    ACTIVE = "active"
    RESOLVED = "resolved"
    ESCALATED = "escalated"


class ApprovalStatus(str, PyEnum):
    """Decision state of leave and absence requests."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class GateRequestStatus(str, PyEnum):
    """Decision state of a gate approval request."""
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class VisitorStatus(str, PyEnum):
    """Visitor presence."""
    ON_PREMISES = "on_premises"
    EXITED = "exited"


class InterventionStatus(str, PyEnum):
    """Follow-up state of a flagged student."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class InsightStatus(str, PyEnum):
    """Lifecycle of a generated insight."""
    ACTIVE = "active"
    ACTIONED = "actioned"
    DISMISSED = "dismissed"


class LogSeverity(str, PyEnum):
    """System log level."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# People

class Profile(Base):
    """Auth provider profile; id matches the token subject."""
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(50), default="teacher", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class RegistryEntry(Base):
    """Student, staff or visitor identity in ``user_registry``."""
    __tablename__ = "user_registry"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    person_type: Mapped[PersonType] = mapped_column(
        _enum(PersonType), default=PersonType.STUDENT, nullable=False
    )
    grade: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    class_name: Mapped[Optional[str]] = mapped_column("class", String(50), nullable=True)
    stream: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    house: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    parent_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    parent_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    current_status: Mapped[PresenceStatus] = mapped_column(
        _enum(PresenceStatus), default=PresenceStatus.UNKNOWN, nullable=False
    )
    last_seen_camera: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    risk_level: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    risk_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    attendance_rate_30day: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_user_registry_person_type", "person_type"),
    )


class Student(Base):
    """Student row used by auto-registration and roll-call attendance."""
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    grade: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    class_name: Mapped[Optional[str]] = mapped_column("class", String(50), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    face_descriptor: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    status: Mapped[PresenceStatus] = mapped_column(
        _enum(PresenceStatus), default=PresenceStatus.UNKNOWN, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


# Attendance and movement

class AttendanceRecord(Base):
    """Roll-call or period attendance row in ``attendance``."""
    __tablename__ = "attendance"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_attendance_student_id", "student_id"),
    )


class AttendanceLog(Base):
    """Camera detection written by the external pipeline."""
    __tablename__ = "attendance_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    user_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    person_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    camera_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    camera_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    attendance_status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    confidence_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    capture_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_attendance_logs_timestamp", "timestamp"),
    )


class StudentMovement(Base):
    """Entry or exit movement."""
    __tablename__ = "student_movements"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[str] = mapped_column(String(100), nullable=False)
    student_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    movement_type: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    return_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    late_return: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class StudentWhereabouts(Base):
    """Current versus expected location of a student."""
    __tablename__ = "student_whereabouts"

    user_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    class_name: Mapped[Optional[str]] = mapped_column("class", String(50), nullable=True)
    current_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    expected_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    location_match: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


# Anomalies and interventions

class Anomaly(Base):
    """Detected behavioural or location deviation."""
    __tablename__ = "anomalies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    severity: Mapped[Severity] = mapped_column(
        _enum(Severity), default=Severity.WARNING, nullable=False
    )
    status: Mapped[AnomalyStatus] = mapped_column(
        _enum(AnomalyStatus), default=AnomalyStatus.ACTIVE, nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    student_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    student_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    student_class: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    camera_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    expected_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    actual_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_seen_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    intervention_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    intervention_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    intervention_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    detected_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_anomalies_status_severity", "status", "severity"),
        Index("ix_anomalies_detected_at", "detected_at"),
    )


class SpeakerZone(Base):
    """Named group of speakers targetable by a broadcast."""
    __tablename__ = "speaker_zones"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    zone_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    zone_name: Mapped[str] = mapped_column(String(255), nullable=False)
    speaker_ids: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)


class VoiceIntervention(Base):
    """Record of a voice broadcast."""
    __tablename__ = "voice_interventions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    anomaly_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    broadcast_type: Mapped[str] = mapped_column(String(50), nullable=False)
    zone: Mapped[str] = mapped_column(String(255), nullable=False)
    speaker_ids: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    message_text: Mapped[str] = mapped_column(Text, nullable=False)
    admin_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    admin_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    duration_seconds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class FlaggedStudent(Base):
    """Student flagged for follow-up."""
    __tablename__ = "flagged_students"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[str] = mapped_column(String(100), nullable=False)
    student_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    flag_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    absence_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    intervention_status: Mapped[InterventionStatus] = mapped_column(
        _enum(InterventionStatus), default=InterventionStatus.PENDING, nullable=False
    )
    flagged_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    resolution_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Insight(Base):
    """Generated pattern, trend or recommendation."""
    __tablename__ = "ai_insights"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    insight_type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    severity: Mapped[str] = mapped_column(String(20), default="info", nullable=False)
    status: Mapped[InsightStatus] = mapped_column(
        _enum(InsightStatus), default=InsightStatus.ACTIVE, nullable=False
    )
    detected_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


# Gate

class GateApprovalRequest(Base):
    """Entry or exit authorisation awaiting a decision."""
    __tablename__ = "gate_approval_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    person_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    person_name: Mapped[str] = mapped_column(String(255), nullable=False)
    request_type: Mapped[str] = mapped_column(String(20), default="exit", nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    urgency: Mapped[str] = mapped_column(String(20), default="low", nullable=False)
    status: Mapped[GateRequestStatus] = mapped_column(
        _enum(GateRequestStatus), default=GateRequestStatus.PENDING, nullable=False
    )
    requested_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    approved_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    denial_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class GateTransaction(Base):
    """Passage through a gate."""
    __tablename__ = "gate_transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    person_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    person_name: Mapped[str] = mapped_column(String(255), nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    gate: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class Visitor(Base):
    """Visitor registered at the gate."""
    __tablename__ = "visitor_registry"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    id_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    company_organization: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    purpose: Mapped[str] = mapped_column(Text, nullable=False)
    host_staff_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    entry_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    expected_exit_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    actual_exit_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    approved_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    entry_gate: Mapped[str] = mapped_column(String(100), default="Main Gate", nullable=False)
    status: Mapped[VisitorStatus] = mapped_column(
        _enum(VisitorStatus), default=VisitorStatus.ON_PREMISES, nullable=False
    )


class LeaveApproval(Base):
    """Leave request for a student."""
    __tablename__ = "leave_approvals"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[str] = mapped_column(String(100), nullable=False)
    student_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    class_name: Mapped[Optional[str]] = mapped_column("class", String(50), nullable=True)
    leave_type: Mapped[str] = mapped_column(String(50), default="weekend_home", nullable=False)
    leave_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    duration_hours: Mapped[int] = mapped_column(Integer, nullable=False)

    guardian_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    guardian_id_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    guardian_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    guardian_relationship: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    requested_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    requested_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    approval_status: Mapped[ApprovalStatus] = mapped_column(
        _enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False
    )
    approved_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    exit_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class AbsenceRequest(Base):
    """Absence reason submitted for approval."""
    __tablename__ = "absence_reasons"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[str] = mapped_column(String(100), nullable=False)
    student_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    reason: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    approval_status: Mapped[ApprovalStatus] = mapped_column(
        _enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    approved_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


# Devices, schedules and audit

class CameraMetadata(Base):
    """Registration of a physical capture device."""
    __tablename__ = "camera_metadata"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    device_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    location_tag: Mapped[str] = mapped_column(String(255), nullable=False)
    building: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    floor: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    rtsp_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Maintained by device heartbeats, never by this app
    is_online: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_heartbeat: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class TimetableTemplate(Base):
    """One period of a timetable template."""
    __tablename__ = "timetable_template"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    template_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    period_number: Mapped[int] = mapped_column(Integer, nullable=False)
    period_name: Mapped[str] = mapped_column(String(100), nullable=False)
    period_type: Mapped[str] = mapped_column(String(50), nullable=False)
    start_time: Mapped[str] = mapped_column(String(8), nullable=False)
    end_time: Mapped[str] = mapped_column(String(8), nullable=False)


class SpecialEvent(Base):
    """Field trip, tournament, assembly or other special event."""
    __tablename__ = "special_events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    event_location: Mapped[str] = mapped_column(String(255), nullable=False)
    start_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    participant_ids: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    participant_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="planned", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class SystemLog(Base):
    """Audit log row."""
    __tablename__ = "system_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    log_type: Mapped[str] = mapped_column(String(100), nullable=False)
    log_category: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[Optional[dict]] = mapped_column("metadata", JSON, nullable=True)
    severity: Mapped[LogSeverity] = mapped_column(
        _enum(LogSeverity), default=LogSeverity.INFO, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_system_logs_created_at", "created_at"),
    )
