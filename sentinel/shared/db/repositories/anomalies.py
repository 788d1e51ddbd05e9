"""Anomaly repository."""

from typing import Optional, List
from uuid import UUID
from datetime import datetime

from sqlalchemy import case

from ..models import Anomaly, AnomalyStatus, Severity, utcnow
from .base import Repository


# Display order of the severity tiers
_SEVERITY_RANK = case(
    (Anomaly.severity == Severity.CRITICAL, 0),
    (Anomaly.severity == Severity.WARNING, 1),
    else_=2,
)


class AnomalyRepository(Repository[Anomaly]):
    """Repository for anomaly queries and state changes."""

    model = Anomaly

    async def get_filtered(
        self,
        status: Optional[AnomalyStatus] = AnomalyStatus.ACTIVE,
        severity: Optional[Severity] = None,
        limit: Optional[int] = 50,
    ) -> List[Anomaly]:
        """Get anomalies with filters, newest first. A limit of None returns all."""
        conditions = []
        if status:
            conditions.append(Anomaly.status == status)
        if severity:
            conditions.append(Anomaly.severity == severity)

        query = (
            self._base_query()
            .where(*conditions)
            .order_by(Anomaly.detected_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return await self._all(query)

    async def get_active(self) -> List[Anomaly]:
        """Active anomalies ordered by severity tier, then newest first."""
        query = (
            self._base_query()
            .where(Anomaly.status == AnomalyStatus.ACTIVE)
            .order_by(_SEVERITY_RANK, Anomaly.detected_at.desc())
        )
        return await self._all(query)

    async def get_recent(self, limit: int = 100) -> List[Anomaly]:
        """Most recently created anomalies in any state."""
        query = self._base_query().order_by(Anomaly.created_at.desc()).limit(limit)
        return await self._all(query)

    async def count_resolved_since(self, since: datetime) -> int:
        """Count anomalies resolved at or after ``since``."""
        return await self.count(
            Anomaly.status == AnomalyStatus.RESOLVED,
            Anomaly.resolved_at >= since,
        )

    async def resolve(self, anomaly: Anomaly) -> Anomaly:
        """Mark an anomaly resolved."""
        anomaly.status = AnomalyStatus.RESOLVED
        anomaly.resolved_at = utcnow()
        return await self.update(anomaly)

    async def escalate(self, anomaly: Anomaly) -> Anomaly:
        """Raise an anomaly to critical severity."""
        anomaly.severity = Severity.CRITICAL
        return await self.update(anomaly)

    async def record_intervention(
        self,
        anomaly_id: UUID,
        intervention_type: str,
        intervention_by: Optional[str],
    ) -> Optional[Anomaly]:
        """Stamp intervention fields on an anomaly, if it exists."""
        anomaly = await self.get_by_id(anomaly_id)
        if not anomaly:
            return None
        anomaly.intervention_type = intervention_type
        anomaly.intervention_at = utcnow()
        anomaly.intervention_by = intervention_by
        return await self.update(anomaly)
