"""View builders: the queries and aggregation behind each page."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core import ViewCache
from ..core.aggregation import (
    chronic_absenteeism,
    count_by,
    count_event_types,
    count_punctuality,
    group_by_location,
    hourly_activity,
    is_same_day,
    partition_by_severity,
    start_of_day,
    summarize_roster,
)
from ..shared.db.models import (
    AnomalyStatus,
    ApprovalStatus,
    InsightStatus,
    InterventionStatus,
    LogSeverity,
    PersonType,
    PresenceStatus,
    VisitorStatus,
    utcnow,
)
from ..shared.db.repositories import (
    AbsenceRequestRepository,
    AnomalyRepository,
    AttendanceLogRepository,
    AttendanceRepository,
    CameraRepository,
    FlaggedStudentRepository,
    GateRequestRepository,
    GateTransactionRepository,
    InsightRepository,
    LeaveRepository,
    MovementRepository,
    RegistryRepository,
    SpecialEventRepository,
    StudentRepository,
    SystemLogRepository,
    TimetableRepository,
    VisitorRepository,
    WhereaboutsRepository,
)
from ..shared.schemas.admin import (
    AbsenceResponse,
    AttendanceLogResponse,
    FlaggedStudentResponse,
    InsightResponse,
    MovementResponse,
    SpecialEventResponse,
    SystemLogResponse,
    TimetableResponse,
    WhereaboutsResponse,
)
from ..shared.schemas.anomaly import AnomalyResponse
from ..shared.schemas.camera import CameraResponse
from ..shared.schemas.gate import (
    GateRequestResponse,
    GateTransactionResponse,
    LeaveResponse,
    VisitorResponse,
)
from ..shared.schemas.student import RegistryResponse
from ..shared.schemas import views as models

logger = logging.getLogger(__name__)

DASHBOARD_LOG_LIMIT = 100
DASHBOARD_ROSTER_LIMIT = 2000
DASHBOARD_ANOMALY_LIMIT = 100
ATTENDANCE_ROSTER_LIMIT = 100
VISITOR_LIMIT = 50


class UnknownView(LookupError):
    """Raised for a view name with no builder."""


class _Queries:
    """Runs view queries, replacing failures with empty results.

    Rows that cannot be read or serialised (a status outside the known
    values, a missing required column) are left out. Any such failure marks
    the view partial, so views must read ``partial`` after their last
    ``fetch``/``dump``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.partial = False

    async def fetch(self, label: str, query: Awaitable[Any], default: Any = None) -> Any:
        try:
            return await query
        except (SQLAlchemyError, LookupError) as e:
            # LookupError: stored enum value outside the known set
            logger.error("[VIEW] %s query failed: %s", label, e)
            await self.db.rollback()
            self.partial = True
            return [] if default is None else default

    def dump(self, schema, rows) -> list:
        out = []
        for row in rows:
            try:
                out.append(schema.model_validate(row))
            except ValidationError as e:
                logger.warning("[VIEW] Skipping unreadable %s row: %s", schema.__name__, e)
                self.partial = True
        return out


async def build_dashboard(db: AsyncSession) -> models.DashboardView:
    q = _Queries(db)
    today = start_of_day()
    logs = await q.fetch(
        "dashboard attendance",
        AttendanceLogRepository(db).get_since(today, limit=DASHBOARD_LOG_LIMIT),
    )
    students = await q.fetch(
        "dashboard roster",
        RegistryRepository(db).get_students(limit=DASHBOARD_ROSTER_LIMIT),
    )
    anomalies = await q.fetch(
        "dashboard anomalies",
        AnomalyRepository(db).get_recent(limit=DASHBOARD_ANOMALY_LIMIT),
    )

    return models.DashboardView(
        stats=summarize_roster(students),
        event_counts=count_event_types(logs),
        punctuality=count_punctuality(logs),
        hourly=hourly_activity(logs),
        recent_activity=q.dump(AttendanceLogResponse, logs),
        anomalies=q.dump(AnomalyResponse, anomalies),
        partial=q.partial,
    )


async def build_action_queue(db: AsyncSession) -> models.ActionQueueView:
    q = _Queries(db)
    active = await q.fetch(
        "active anomalies",
        AnomalyRepository(db).get_filtered(status=AnomalyStatus.ACTIVE, limit=None),
    )
    resolved_today = await q.fetch(
        "resolved anomalies",
        AnomalyRepository(db).count_resolved_since(start_of_day()),
        default=0,
    )
    students = await q.fetch("roster", RegistryRepository(db).get_students())

    groups = partition_by_severity(q.dump(AnomalyResponse, active))
    return models.ActionQueueView(
        critical=groups["critical"],
        warning=groups["warning"],
        watchlist=groups["watchlist"],
        resolved_today=resolved_today,
        on_campus=summarize_roster(students).present,
        active_alerts=len(groups["critical"]) + len(groups["warning"]),
        partial=q.partial,
    )


async def build_attendance(db: AsyncSession) -> models.AttendanceView:
    q = _Queries(db)
    students = await q.fetch(
        "attendance roster",
        RegistryRepository(db).get_students(limit=ATTENDANCE_ROSTER_LIMIT),
    )
    logs = await q.fetch(
        "attendance today",
        AttendanceLogRepository(db).get_since(start_of_day(), person_type=PersonType.STUDENT.value),
    )

    roster = summarize_roster(students)
    return models.AttendanceView(
        students=q.dump(RegistryResponse, students),
        today_logs=q.dump(AttendanceLogResponse, logs),
        on_campus=roster.present,
        off_campus=roster.off_campus,
        event_counts=count_event_types(logs),
        punctuality=count_punctuality(logs),
        partial=q.partial,
    )


async def build_cameras(db: AsyncSession) -> models.CamerasView:
    q = _Queries(db)
    cameras = await q.fetch("cameras", CameraRepository(db).get_listed())
    return models.CamerasView(
        cameras=q.dump(CameraResponse, cameras),
        online=sum(1 for c in cameras if c.is_online),
        partial=q.partial,
    )


async def build_gate_security(db: AsyncSession) -> models.GateSecurityView:
    q = _Queries(db)
    on_campus = await q.fetch(
        "students on campus",
        RegistryRepository(db).get_students(status=PresenceStatus.ON_CAMPUS),
    )
    pending = await q.fetch("pending gate requests", GateRequestRepository(db).get_pending())
    exits = await q.fetch("expected exits", LeaveRepository(db).get_awaiting_exit())
    transactions = await q.fetch("gate transactions", GateTransactionRepository(db).get_recent())
    visitors = await q.fetch(
        "visitors on premises",
        VisitorRepository(db).get_recent(status=VisitorStatus.ON_PREMISES),
    )

    return models.GateSecurityView(
        on_campus=q.dump(RegistryResponse, on_campus),
        pending_requests=q.dump(GateRequestResponse, pending),
        expected_exits=q.dump(LeaveResponse, exits),
        recent_transactions=q.dump(GateTransactionResponse, transactions),
        active_visitors=q.dump(VisitorResponse, visitors),
        partial=q.partial,
    )


async def build_visitors(db: AsyncSession) -> models.VisitorsView:
    q = _Queries(db)
    visitors = await q.fetch("visitors", VisitorRepository(db).get_recent(limit=VISITOR_LIMIT))
    return models.VisitorsView(
        visitors=q.dump(VisitorResponse, visitors),
        on_premises=sum(1 for v in visitors if v.status == VisitorStatus.ON_PREMISES),
        partial=q.partial,
    )


async def build_leave_management(db: AsyncSession) -> models.LeaveManagementView:
    q = _Queries(db)
    repo = LeaveRepository(db)
    pending = await q.fetch("pending leave", repo.get_filtered(status=ApprovalStatus.PENDING))
    awaiting = await q.fetch("leave awaiting exit", repo.get_awaiting_exit())
    return models.LeaveManagementView(
        pending=q.dump(LeaveResponse, pending),
        awaiting_exit=q.dump(LeaveResponse, awaiting),
        partial=q.partial,
    )


async def build_absence_requests(db: AsyncSession) -> models.AbsenceRequestsView:
    q = _Queries(db)
    requests = await q.fetch("absence requests", AbsenceRequestRepository(db).get_recent())
    return models.AbsenceRequestsView(
        requests=q.dump(AbsenceResponse, requests),
        counts=count_by(requests, "approval_status"),
        partial=q.partial,
    )


async def build_movements(db: AsyncSession) -> models.MovementsView:
    q = _Queries(db)
    movements = await q.fetch("movements", MovementRepository(db).get_recent())
    now = utcnow()
    out = [m for m in movements if m.movement_type == "exit" and not m.return_confirmed]
    return models.MovementsView(
        movements=q.dump(MovementResponse, movements),
        currently_out=len(out),
        today=sum(1 for m in movements if is_same_day(m.timestamp, now)),
        late_returns=sum(1 for m in out if m.late_return),
        partial=q.partial,
    )


async def build_whereabouts(db: AsyncSession) -> models.WhereaboutsView:
    q = _Queries(db)
    records = await q.fetch("whereabouts", WhereaboutsRepository(db).get_latest())
    matched = sum(1 for r in records if r.location_match)
    return models.WhereaboutsView(
        records=q.dump(WhereaboutsResponse, records),
        matched=matched,
        discrepancies=len(records) - matched,
        partial=q.partial,
    )


async def build_live_map(db: AsyncSession) -> models.LiveMapView:
    q = _Queries(db)
    records = await q.fetch("whereabouts", WhereaboutsRepository(db).get_latest())
    cameras = await q.fetch("active cameras", CameraRepository(db).get_listed(active_only=True))

    locations = group_by_location(q.dump(WhereaboutsResponse, records))
    return models.LiveMapView(
        locations=locations,
        cameras=q.dump(CameraResponse, cameras),
        tracked=len(records),
        cameras_online=sum(1 for c in cameras if c.is_online),
        discrepancies=sum(1 for r in records if not r.location_match),
        partial=q.partial,
    )


async def build_system_logs(
    db: AsyncSession,
    severity: Optional[str] = None,
    search: Optional[str] = None,
) -> models.SystemLogsView:
    q = _Queries(db)
    logs = await q.fetch(
        "system logs",
        SystemLogRepository(db).get_filtered(
            severity=LogSeverity(severity) if severity else None,
            search=search or None,
        ),
    )
    return models.SystemLogsView(
        logs=q.dump(SystemLogResponse, logs),
        counts=count_by(logs, "severity"),
        partial=q.partial,
    )


async def build_flagged_students(db: AsyncSession) -> models.FlaggedStudentsView:
    q = _Queries(db)
    flagged = await q.fetch("flagged students", FlaggedStudentRepository(db).get_recent())
    counts = {status.value: 0 for status in InterventionStatus}
    counts.update(count_by(flagged, "intervention_status"))
    return models.FlaggedStudentsView(
        flagged=q.dump(FlaggedStudentResponse, flagged),
        counts=counts,
        partial=q.partial,
    )


async def build_student_risk(db: AsyncSession) -> models.StudentRiskView:
    q = _Queries(db)
    students = await q.fetch("students at risk", RegistryRepository(db).get_at_risk())
    flags = await q.fetch(
        "pending flags",
        FlaggedStudentRepository(db).get_recent(status=InterventionStatus.PENDING),
    )
    levels = count_by(students, "risk_level")
    return models.StudentRiskView(
        students=q.dump(RegistryResponse, students),
        pending_flags=q.dump(FlaggedStudentResponse, flags),
        critical=levels.get("critical", 0),
        high_risk=levels.get("high_risk", 0),
        watch=levels.get("watch", 0),
        partial=q.partial,
    )


async def build_insights(db: AsyncSession) -> models.InsightsView:
    q = _Queries(db)
    insights = await q.fetch("insights", InsightRepository(db).get_recent())
    active = [i for i in insights if i.status == InsightStatus.ACTIVE]
    return models.InsightsView(
        insights=q.dump(InsightResponse, insights),
        active=len(active),
        critical=sum(1 for i in active if i.severity == "critical"),
        actioned=sum(1 for i in insights if i.status == InsightStatus.ACTIONED),
        recommendations=sum(1 for i in insights if i.insight_type == "recommendation"),
        partial=q.partial,
    )


async def build_chronic_absenteeism(db: AsyncSession) -> models.ChronicAbsenteeismView:
    q = _Queries(db)
    students = await q.fetch("students", StudentRepository(db).get_all())
    records = await q.fetch("morning roll", AttendanceRepository(db).get_morning_roll())
    return models.ChronicAbsenteeismView(
        students=chronic_absenteeism(students, records),
        partial=q.partial,
    )


async def build_events(db: AsyncSession) -> models.EventsView:
    q = _Queries(db)
    events = await q.fetch("special events", SpecialEventRepository(db).get_ordered())
    return models.EventsView(events=q.dump(SpecialEventResponse, events), partial=q.partial)


async def build_timetables(db: AsyncSession) -> models.TimetablesView:
    q = _Queries(db)
    periods = await q.fetch("timetables", TimetableRepository(db).get_ordered())
    return models.TimetablesView(periods=q.dump(TimetableResponse, periods), partial=q.partial)


@dataclass
class ViewDefinition:
    """Builder for a view and the tables whose changes invalidate it."""
    builder: Callable[..., Awaitable[models.View]]
    tables: Tuple[str, ...]
    params: Tuple[str, ...] = ()
    # Free-text params; views filtered by them are built per request
    uncached: Tuple[str, ...] = ()


VIEWS: Dict[str, ViewDefinition] = {
    "dashboard": ViewDefinition(build_dashboard, ("attendance_logs", "user_registry", "anomalies")),
    "action-queue": ViewDefinition(build_action_queue, ("anomalies", "user_registry")),
    "attendance": ViewDefinition(build_attendance, ("attendance_logs", "user_registry")),
    "cameras": ViewDefinition(build_cameras, ("camera_metadata",)),
    "gate-security": ViewDefinition(
        build_gate_security,
        ("user_registry", "gate_approval_requests", "leave_approvals",
         "gate_transactions", "visitor_registry"),
    ),
    "visitors": ViewDefinition(build_visitors, ("visitor_registry",)),
    "leave-management": ViewDefinition(build_leave_management, ("leave_approvals",)),
    "absence-requests": ViewDefinition(build_absence_requests, ("absence_reasons",)),
    "student-movements": ViewDefinition(build_movements, ("student_movements",)),
    "whereabouts": ViewDefinition(build_whereabouts, ("student_whereabouts",)),
    "live-map": ViewDefinition(build_live_map, ("student_whereabouts", "camera_metadata")),
    "system-logs": ViewDefinition(
        build_system_logs, ("system_logs",),
        params=("severity", "search"), uncached=("search",),
    ),
    "flagged-students": ViewDefinition(build_flagged_students, ("flagged_students",)),
    "student-risk": ViewDefinition(build_student_risk, ("user_registry", "flagged_students")),
    "insights": ViewDefinition(build_insights, ("ai_insights",)),
    "chronic-absenteeism": ViewDefinition(build_chronic_absenteeism, ("students", "attendance")),
    "events": ViewDefinition(build_events, ("special_events",)),
    "timetables": ViewDefinition(build_timetables, ("timetable_template",)),
}


def cache_key(name: str, params: Dict[str, Optional[str]]) -> str:
    if not params:
        return name
    query = "&".join(f"{k}={v}" for k, v in sorted(params.items()) if v)
    return f"{name}?{query}" if query else name


async def get_view(
    name: str,
    db: AsyncSession,
    cache: ViewCache,
    params: Optional[Dict[str, Optional[str]]] = None,
) -> models.View:
    """
    Build or reuse the named view.

    Views left partial by a failed query are not kept in the cache, and
    views filtered by free text skip it.

    Raises:
        UnknownView: If no view has that name
    """
    definition = VIEWS.get(name)
    if definition is None:
        raise UnknownView(name)

    params = {k: v for k, v in (params or {}).items() if k in definition.params}
    if any(params.get(p) for p in definition.uncached):
        return await definition.builder(db, **params)

    key = cache_key(name, params)
    view = await cache.get(key, definition.tables, lambda: definition.builder(db, **params))
    if view.partial:
        cache.discard(key)
    return view
