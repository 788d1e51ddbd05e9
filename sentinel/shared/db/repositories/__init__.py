"""Database repositories, one module per table family."""

from .base import Repository
from .anomalies import AnomalyRepository
from .students import RegistryRepository, StudentRepository, RISK_LEVELS
from .attendance import (
    AttendanceLogRepository,
    AttendanceRepository,
    MovementRepository,
    WhereaboutsRepository,
)
from .gate import (
    GateRequestRepository,
    GateTransactionRepository,
    VisitorRepository,
    LeaveRepository,
)
from .cameras import CameraRepository
from .admin import (
    TimetableRepository,
    SpecialEventRepository,
    SystemLogRepository,
    AbsenceRequestRepository,
    FlaggedStudentRepository,
    InsightRepository,
    SpeakerZoneRepository,
    VoiceInterventionRepository,
    ProfileRepository,
)

__all__ = [
    # Base
    "Repository",
    # People
    "RegistryRepository",
    "StudentRepository",
    "ProfileRepository",
    "RISK_LEVELS",
    # Attendance
    "AttendanceLogRepository",
    "AttendanceRepository",
    "MovementRepository",
    "WhereaboutsRepository",
    # Anomalies and interventions
    "AnomalyRepository",
    "FlaggedStudentRepository",
    "InsightRepository",
    "SpeakerZoneRepository",
    "VoiceInterventionRepository",
    # Gate
    "GateRequestRepository",
    "GateTransactionRepository",
    "VisitorRepository",
    "LeaveRepository",
    "AbsenceRequestRepository",
    # Admin
    "CameraRepository",
    "TimetableRepository",
    "SpecialEventRepository",
    "SystemLogRepository",
]
