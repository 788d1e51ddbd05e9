"""Pydantic schemas for API requests, responses and view models."""

from .common import ActionResponse, DataEnvelope, UTCDatetime
from .anomaly import AnomalyCreate, AnomalyResponse, SeverityGroups
from .camera import CameraRegister, CameraResponse
from .gate import (
    GateDecision,
    GateDenial,
    GateRequestResponse,
    GateTransactionResponse,
    VisitorRegister,
    VisitorResponse,
    LeaveCreate,
    LeaveResponse,
)
from .student import (
    RegistryCreate,
    RegistryUpdate,
    RegistryResponse,
    StudentResponse,
    AutoRegisterRequest,
    UnregisteredRegister,
    UnregisteredList,
    SyncStatus,
    SyncResult,
)
from .intervention import BroadcastRequest, VoiceInterventionResponse

__all__ = [
    # Envelopes
    "ActionResponse",
    "DataEnvelope",
    "UTCDatetime",
    # Anomalies
    "AnomalyCreate",
    "AnomalyResponse",
    "SeverityGroups",
    # Cameras
    "CameraRegister",
    "CameraResponse",
    # Gate and leave
    "GateDecision",
    "GateDenial",
    "GateRequestResponse",
    "GateTransactionResponse",
    "VisitorRegister",
    "VisitorResponse",
    "LeaveCreate",
    "LeaveResponse",
    # Students
    "RegistryCreate",
    "RegistryUpdate",
    "RegistryResponse",
    "StudentResponse",
    "AutoRegisterRequest",
    "UnregisteredRegister",
    "UnregisteredList",
    "SyncStatus",
    "SyncResult",
    # Interventions
    "BroadcastRequest",
    "VoiceInterventionResponse",
]
