"""Response envelopes shared by the API and the server actions."""

from datetime import datetime, timezone
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel

T = TypeVar("T")


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Timestamps are stored as naive UTC
UTCDatetime = Annotated[datetime, AfterValidator(_naive_utc)]


class DataEnvelope(BaseModel, Generic[T]):
    """``{data}`` wrapper used by the REST endpoints."""
    data: T


class ActionResponse(BaseModel):
    """Outcome of a server action.

    Actions never raise; failures come back with ``success`` false and the
    backend message in ``error``.
    """
    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ActionResponse":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failed(cls, message: str, error: Any) -> "ActionResponse":
        return cls(success=False, message=message, error=str(error))
