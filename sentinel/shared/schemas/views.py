"""View models served to the dashboard pages and ``/api/views``."""

from typing import Dict, List

from pydantic import BaseModel

from ...core.aggregation import (
    RosterStats,
    EventTypeCounts,
    PunctualityCounts,
    HourBucket,
    ChronicAbsence,
)
from .admin import (
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
from .anomaly import AnomalyResponse
from .camera import CameraResponse
from .gate import GateRequestResponse, GateTransactionResponse, LeaveResponse, VisitorResponse
from .student import RegistryResponse


class View(BaseModel):
    """Base for view models.

    ``partial`` is set when a query failed and its section was left empty.
    """
    partial: bool = False


class DashboardView(View):
    stats: RosterStats
    event_counts: EventTypeCounts
    punctuality: PunctualityCounts
    hourly: List[HourBucket]
    recent_activity: List[AttendanceLogResponse]
    anomalies: List[AnomalyResponse]


class ActionQueueView(View):
    critical: List[AnomalyResponse]
    warning: List[AnomalyResponse]
    watchlist: List[AnomalyResponse]
    resolved_today: int
    on_campus: int
    active_alerts: int


class AttendanceView(View):
    students: List[RegistryResponse]
    today_logs: List[AttendanceLogResponse]
    on_campus: int
    off_campus: int
    event_counts: EventTypeCounts
    punctuality: PunctualityCounts


class CamerasView(View):
    cameras: List[CameraResponse]
    online: int


class GateSecurityView(View):
    on_campus: List[RegistryResponse]
    pending_requests: List[GateRequestResponse]
    expected_exits: List[LeaveResponse]
    recent_transactions: List[GateTransactionResponse]
    active_visitors: List[VisitorResponse]


class VisitorsView(View):
    visitors: List[VisitorResponse]
    on_premises: int


class LeaveManagementView(View):
    pending: List[LeaveResponse]
    awaiting_exit: List[LeaveResponse]


class AbsenceRequestsView(View):
    requests: List[AbsenceResponse]
    counts: Dict[str, int]


class MovementsView(View):
    movements: List[MovementResponse]
    currently_out: int
    today: int
    late_returns: int


class WhereaboutsView(View):
    records: List[WhereaboutsResponse]
    matched: int
    discrepancies: int


class LiveMapView(View):
    locations: Dict[str, List[WhereaboutsResponse]]
    cameras: List[CameraResponse]
    tracked: int
    cameras_online: int
    discrepancies: int


class SystemLogsView(View):
    logs: List[SystemLogResponse]
    counts: Dict[str, int]


class FlaggedStudentsView(View):
    flagged: List[FlaggedStudentResponse]
    counts: Dict[str, int]


class StudentRiskView(View):
    students: List[RegistryResponse]
    pending_flags: List[FlaggedStudentResponse]
    critical: int
    high_risk: int
    watch: int


class InsightsView(View):
    insights: List[InsightResponse]
    active: int
    critical: int
    actioned: int
    recommendations: int


class ChronicAbsenteeismView(View):
    students: List[ChronicAbsence]


class EventsView(View):
    events: List[SpecialEventResponse]


class TimetablesView(View):
    periods: List[TimetableResponse]
