"""Database module with async access to the managed store."""

from .database import Database, get_database, get_db_session, normalize_url
from .models import (
    Base,
    utcnow,
    Profile,
    RegistryEntry,
    Student,
    AttendanceRecord,
    AttendanceLog,
    StudentMovement,
    StudentWhereabouts,
    Anomaly,
    SpeakerZone,
    VoiceIntervention,
    FlaggedStudent,
    Insight,
    GateApprovalRequest,
    GateTransaction,
    Visitor,
    LeaveApproval,
    AbsenceRequest,
    CameraMetadata,
    TimetableTemplate,
    SpecialEvent,
    SystemLog,
    PersonType,
    PresenceStatus,
    Severity,
    AnomalyStatus,
    ApprovalStatus,
    GateRequestStatus,
    VisitorStatus,
    InterventionStatus,
    InsightStatus,
    LogSeverity,
)

__all__ = [
    # Database access
    "Database",
    "get_database",
    "get_db_session",
    "normalize_url",
    # Models
    "Base",
    "utcnow",
    "Profile",
    "RegistryEntry",
    "Student",
    "AttendanceRecord",
    "AttendanceLog",
    "StudentMovement",
    "StudentWhereabouts",
    "Anomaly",
    "SpeakerZone",
    "VoiceIntervention",
    "FlaggedStudent",
    "Insight",
    "GateApprovalRequest",
    "GateTransaction",
    "Visitor",
    "LeaveApproval",
    "AbsenceRequest",
    "CameraMetadata",
    "TimetableTemplate",
    "SpecialEvent",
    "SystemLog",
    # Enums
    "PersonType",
    "PresenceStatus",
    "Severity",
    "AnomalyStatus",
    "ApprovalStatus",
    "GateRequestStatus",
    "VisitorStatus",
    "InterventionStatus",
    "InsightStatus",
    "LogSeverity",
]
