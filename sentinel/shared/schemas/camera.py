"""Camera metadata schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CameraRegister(BaseModel):
    """Register camera request schema."""
    device_id: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=255)
    location_tag: str = Field(..., min_length=1, max_length=255)
    building: Optional[str] = None
    floor: Optional[str] = None
    rtsp_url: Optional[str] = None  # Optional, some devices push instead of stream


class CameraResponse(BaseModel):
    """Camera response schema."""
    id: UUID
    device_id: str
    display_name: str
    location_tag: str
    building: Optional[str] = None
    floor: Optional[str] = None
    rtsp_url: Optional[str] = None
    is_active: bool
    is_online: bool
    last_heartbeat: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
