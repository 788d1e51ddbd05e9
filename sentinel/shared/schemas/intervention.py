"""Voice intervention schemas."""

from datetime import datetime
from typing import Optional, List, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BroadcastRequest(BaseModel):
    """Live voice broadcast to a speaker zone."""
    anomaly_id: Optional[UUID] = None
    zone: str = Field(..., min_length=1, description="Speaker zone code")
    message_text: str = Field(..., min_length=1)
    admin_id: Optional[str] = None
    admin_name: Optional[str] = None


class VoiceInterventionResponse(BaseModel):
    id: UUID
    anomaly_id: Optional[UUID] = None
    broadcast_type: str
    zone: str
    speaker_ids: Optional[List[Any]] = None
    message_text: str
    admin_id: Optional[str] = None
    admin_name: Optional[str] = None
    duration_seconds: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
