"""Repositories behind the admin views and actions."""

from typing import Optional, List
from uuid import UUID

from sqlalchemy import or_

from ..models import (
    TimetableTemplate,
    SpecialEvent,
    SystemLog,
    LogSeverity,
    AbsenceRequest,
    FlaggedStudent,
    InterventionStatus,
    Insight,
    SpeakerZone,
    VoiceIntervention,
    Profile,
)
from .base import Repository


class TimetableRepository(Repository[TimetableTemplate]):
    """Repository for timetable periods."""

    model = TimetableTemplate

    async def get_ordered(self) -> List[TimetableTemplate]:
        query = self._base_query().order_by(
            TimetableTemplate.template_name,
            TimetableTemplate.day_of_week,
            TimetableTemplate.period_number,
        )
        return await self._all(query)


class SpecialEventRepository(Repository[SpecialEvent]):
    """Repository for special events."""

    model = SpecialEvent

    async def get_ordered(self) -> List[SpecialEvent]:
        query = self._base_query().order_by(SpecialEvent.start_datetime.desc())
        return await self._all(query)


class SystemLogRepository(Repository[SystemLog]):
    """Repository for the audit log."""

    model = SystemLog

    async def get_filtered(
        self,
        severity: Optional[LogSeverity] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> List[SystemLog]:
        """Log rows with filters, newest first."""
        conditions = []
        if severity:
            conditions.append(SystemLog.severity == severity)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(SystemLog.message.ilike(pattern), SystemLog.log_type.ilike(pattern))
            )

        query = (
            self._base_query()
            .where(*conditions)
            .order_by(SystemLog.created_at.desc())
            .limit(limit)
        )
        return await self._all(query)

    async def log(
        self,
        log_type: str,
        log_category: str,
        message: str,
        details: Optional[dict] = None,
        severity: LogSeverity = LogSeverity.INFO,
    ) -> SystemLog:
        """Append an audit row."""
        return await self.create(SystemLog(
            log_type=log_type,
            log_category=log_category,
            message=message,
            details=details,
            severity=severity,
        ))


class AbsenceRequestRepository(Repository[AbsenceRequest]):
    """Repository for absence requests."""

    model = AbsenceRequest

    async def get_recent(self) -> List[AbsenceRequest]:
        query = self._base_query().order_by(AbsenceRequest.submitted_at.desc())
        return await self._all(query)


class FlaggedStudentRepository(Repository[FlaggedStudent]):
    """Repository for flagged students."""

    model = FlaggedStudent

    async def get_recent(
        self,
        status: Optional[InterventionStatus] = None,
    ) -> List[FlaggedStudent]:
        query = self._base_query()
        if status:
            query = query.where(FlaggedStudent.intervention_status == status)
        return await self._all(query.order_by(FlaggedStudent.flagged_at.desc()))


class InsightRepository(Repository[Insight]):
    """Repository for generated insights."""

    model = Insight

    async def get_recent(self, limit: int = 50) -> List[Insight]:
        query = self._base_query().order_by(Insight.detected_at.desc()).limit(limit)
        return await self._all(query)


class SpeakerZoneRepository(Repository[SpeakerZone]):
    """Repository for speaker zones."""

    model = SpeakerZone

    async def get_by_code(self, zone_code: str) -> Optional[SpeakerZone]:
        query = self._base_query().where(SpeakerZone.zone_code == zone_code)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()


class VoiceInterventionRepository(Repository[VoiceIntervention]):
    """Repository for the broadcast log."""

    model = VoiceIntervention


class ProfileRepository(Repository[Profile]):
    """Read access to auth provider profiles."""

    model = Profile

    async def get_role(self, user_id: UUID) -> Optional[str]:
        """Role stored for the user, if a profile exists."""
        profile = await self.get_by_id(user_id)
        return profile.role if profile else None
