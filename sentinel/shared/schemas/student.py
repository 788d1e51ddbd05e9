"""Student and registry schemas."""

from datetime import datetime
from typing import Optional, List, Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..db.models import PersonType, PresenceStatus

# "class" is a keyword; accept it on input and emit it on output
_CLASS = dict(
    validation_alias=AliasChoices("class_name", "class"),
    serialization_alias="class",
)


class RegistryCreate(BaseModel):
    """Add a student to the registry."""
    user_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("student_id", "user_id")
    )
    full_name: str = Field(..., min_length=1, max_length=255)
    grade: Optional[str] = None
    class_name: Optional[str] = Field(None, **_CLASS)
    stream: Optional[str] = None
    house: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
    photo_url: Optional[str] = None
    current_status: PresenceStatus = Field(
        PresenceStatus.UNKNOWN,
        validation_alias=AliasChoices("status", "current_status"),
    )


class RegistryUpdate(BaseModel):
    """Update a registry entry identified by ``user_id``."""
    user_id: str = Field(..., min_length=1)
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    grade: Optional[str] = None
    class_name: Optional[str] = Field(None, **_CLASS)
    stream: Optional[str] = None
    house: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
    photo_url: Optional[str] = None
    current_status: Optional[PresenceStatus] = None
    risk_level: Optional[str] = None
    is_active: Optional[bool] = None


class RegistryResponse(BaseModel):
    """Registry entry response schema."""
    id: UUID
    user_id: str
    full_name: str
    person_type: PersonType
    grade: Optional[str] = None
    class_name: Optional[str] = Field(None, **_CLASS)
    stream: Optional[str] = None
    house: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
    photo_url: Optional[str] = None
    current_status: PresenceStatus
    last_seen_camera: Optional[str] = None
    risk_level: Optional[str] = None
    risk_score: Optional[float] = None
    attendance_rate_30day: Optional[float] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class RegistrySummary(BaseModel):
    """Short registry listing used by the sync status."""
    user_id: str
    full_name: str

    model_config = ConfigDict(from_attributes=True)


class StudentResponse(BaseModel):
    """Row of the ``students`` table."""
    id: UUID
    student_id: str
    full_name: str
    grade: Optional[str] = None
    class_name: Optional[str] = Field(None, **_CLASS)
    photo_url: Optional[str] = None
    status: PresenceStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AutoRegisterRequest(BaseModel):
    """Detection payload posted by the camera pipeline."""
    person_id: Optional[str] = None
    person_name: Optional[str] = None
    camera_id: Optional[str] = None
    photo_url: Optional[str] = None
    face_descriptor: Optional[Any] = None


class UnregisteredRegister(BaseModel):
    """Register a detected person into the registry."""
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    photo_url: Optional[str] = None
    class_name: Optional[str] = Field(None, **_CLASS)
    stream: Optional[str] = None


class UnregisteredPerson(BaseModel):
    """Person seen by the cameras but missing from the registry."""
    user_id: str
    user_name: Optional[str] = None
    person_type: Optional[str] = None
    capture_image_url: Optional[str] = None
    first_seen: datetime
    detection_count: int


class UnregisteredList(BaseModel):
    count: int
    unregistered: List[UnregisteredPerson]


class SyncStatus(BaseModel):
    """Registry sync status."""
    totalStudents: int
    inRegistry: int
    needsSync: int = 0
    students: List[RegistrySummary]


class SyncResult(BaseModel):
    message: str
    synced: int = 0
