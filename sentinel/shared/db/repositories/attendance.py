"""Attendance, detection and movement repositories."""

from typing import Optional, List
from datetime import datetime

from ..models import (
    AttendanceLog,
    AttendanceRecord,
    StudentMovement,
    StudentWhereabouts,
)
from .base import Repository

MORNING_ROLL = "morning_roll"


class AttendanceLogRepository(Repository[AttendanceLog]):
    """Repository for camera detections."""

    model = AttendanceLog

    async def get_since(
        self,
        since: datetime,
        person_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[AttendanceLog]:
        """Detections created at or after ``since``, newest first."""
        query = self._base_query().where(AttendanceLog.created_at >= since)
        if person_type:
            query = query.where(AttendanceLog.person_type == person_type)
        query = query.order_by(AttendanceLog.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return await self._all(query)

    async def get_for_person_type(self, person_type: str) -> List[AttendanceLog]:
        """All detections of one person type, newest first."""
        query = (
            self._base_query()
            .where(AttendanceLog.person_type == person_type)
            .order_by(AttendanceLog.timestamp.desc())
        )
        return await self._all(query)


class AttendanceRepository(Repository[AttendanceRecord]):
    """Repository for roll-call attendance."""

    model = AttendanceRecord

    async def get_morning_roll(self) -> List[AttendanceRecord]:
        """All morning roll-call records."""
        query = self._base_query().where(AttendanceRecord.event_type == MORNING_ROLL)
        return await self._all(query)


class MovementRepository(Repository[StudentMovement]):
    """Repository for student entry and exit movements."""

    model = StudentMovement

    async def get_recent(self, limit: int = 100) -> List[StudentMovement]:
        query = (
            self._base_query()
            .order_by(StudentMovement.timestamp.desc())
            .limit(limit)
        )
        return await self._all(query)


class WhereaboutsRepository(Repository[StudentWhereabouts]):
    """Repository for current student locations."""

    model = StudentWhereabouts

    async def get_latest(self) -> List[StudentWhereabouts]:
        query = self._base_query().order_by(StudentWhereabouts.updated_at.desc())
        return await self._all(query)
