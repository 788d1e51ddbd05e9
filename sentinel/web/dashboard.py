"""Dashboard HTML templates and renderers."""

from datetime import datetime
from html import escape
from string import Template
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from ..shared.schemas import views as models

PAGE_HTML = Template("""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>SmartSchool Sentinel - $title</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <style>
        body { background-color: #f9fafb; }
        .card { background-color: #ffffff; border: 1px solid #e5e7eb; border-radius: 0.75rem; }
        .empty { color: #6b7280; text-align: center; padding: 2rem 0; }
        .badge { font-size: 0.75rem; padding: 2px 8px; border-radius: 9999px; }
        .badge-critical { background-color: #fee2e2; color: #b91c1c; }
        .badge-warning { background-color: #ffedd5; color: #c2410c; }
        .badge-watchlist { background-color: #fef9c3; color: #a16207; }
        .badge-info { background-color: #dbeafe; color: #1d4ed8; }
        .partial { background-color: #fef3c7; color: #92400e; padding: 8px 16px; border-radius: 8px; }
    </style>
</head>
<body class="text-gray-900 min-h-screen">
    <div class="bg-white border-b">
        <div class="max-w-[1600px] mx-auto px-6 py-4 flex items-center justify-between">
            <div>
                <h1 class="text-2xl font-bold">SmartSchool Sentinel - $title</h1>
                <p class="text-gray-500 text-sm">Signed in as $user</p>
            </div>
            <nav class="flex gap-4 text-sm text-blue-700">
                <a href="/dashboard">Dashboard</a>
                <a href="/attendance">Attendance</a>
                <a href="/gate-security">Gate</a>
                <a href="/leave-management">Leave</a>
                <a href="/admin/action-queue">Action Queue</a>
                <a href="/admin/cameras">Cameras</a>
                <a href="/admin/system-logs">Logs</a>
            </nav>
        </div>
    </div>
    <main class="max-w-[1600px] mx-auto p-6 space-y-6">
$content
    </main>
    <script>
        // Reload when a table behind this page changes
        const source = new EventSource('/api/sse/changes?tables=$tables', { withCredentials: true });
        let pending = null;
        source.addEventListener('invalidate', () => {
            if (pending) return;
            pending = setTimeout(() => window.location.reload(), 1000);
        });
    </script>
</body>
</html>
""")


def text(value: Any) -> str:
    """Escape a value for HTML, showing '-' for missing values."""
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    return escape(str(getattr(value, "value", value)))


def badge(value: Any) -> str:
    label = text(value)
    return f'<span class="badge badge-{label}">{label}</span>'


def stat_cards(stats: Sequence[Tuple[str, Any]]) -> str:
    cards = "".join(
        f'<div class="card p-4 text-center"><div class="text-3xl font-bold">{text(value)}</div>'
        f'<div class="text-sm text-gray-600">{escape(label)}</div></div>'
        for label, value in stats
    )
    return f'<div class="grid grid-cols-2 md:grid-cols-4 gap-4">{cards}</div>'


def section(title: str, body: str) -> str:
    return (
        f'<section class="card p-6"><h2 class="text-lg font-semibold mb-4">{escape(title)}</h2>'
        f"{body}</section>"
    )


def empty_state(message: str) -> str:
    return f'<p class="empty">{escape(message)}</p>'


Column = Tuple[str, Callable[[Any], Any]]


def table(columns: Sequence[Column], rows: Iterable[Any], empty: str) -> str:
    """Render rows as a table, or the empty-state message when there are none."""
    rows = list(rows)
    if not rows:
        return empty_state(empty)

    head = "".join(f'<th class="text-left py-2 pr-4">{escape(h)}</th>' for h, _ in columns)
    body = "".join(
        "<tr class=\"border-t\">"
        + "".join(f'<td class="py-2 pr-4">{_cell(get(row))}</td>' for _, get in columns)
        + "</tr>"
        for row in rows
    )
    return f'<table class="w-full text-sm"><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>'


def _cell(value: Any) -> str:
    # Pre-rendered markup is passed through
    if isinstance(value, Markup):
        return value
    return text(value)


class Markup(str):
    """String that is already safe HTML."""


def render_page(title: str, content: str, user: Optional[str], tables: Iterable[str]) -> str:
    return PAGE_HTML.substitute(
        title=escape(title),
        content=content,
        user=text(user),
        tables=escape(",".join(tables)),
    )


def _partial_notice(view: models.View) -> str:
    if not view.partial:
        return ""
    return '<p class="partial">Some data could not be loaded.</p>'


ANOMALY_COLUMNS: List[Column] = [
    ("Severity", lambda a: Markup(badge(a.severity))),
    ("Title", lambda a: a.title),
    ("Student", lambda a: a.student_name),
    ("Location", lambda a: a.actual_location or a.last_seen_location),
    ("Detected", lambda a: a.detected_at),
]

LOG_COLUMNS: List[Column] = [
    ("Time", lambda l: l.timestamp),
    ("Person", lambda l: l.user_name),
    ("Event", lambda l: l.event_type),
    ("Camera", lambda l: l.camera_name),
    ("Status", lambda l: l.attendance_status),
]

STUDENT_COLUMNS: List[Column] = [
    ("ID", lambda s: s.user_id),
    ("Name", lambda s: s.full_name),
    ("Class", lambda s: s.class_name),
    ("Status", lambda s: s.current_status),
    ("Last seen", lambda s: s.last_seen_camera),
]

LEAVE_COLUMNS: List[Column] = [
    ("Student", lambda l: l.student_name or l.student_id),
    ("Type", lambda l: l.leave_type),
    ("From", lambda l: l.start_datetime),
    ("To", lambda l: l.end_datetime),
    ("Hours", lambda l: l.duration_hours),
    ("Guardian", lambda l: l.guardian_name),
]

VISITOR_COLUMNS: List[Column] = [
    ("Name", lambda v: v.full_name),
    ("Organisation", lambda v: v.company_organization),
    ("Purpose", lambda v: v.purpose),
    ("Host", lambda v: v.host_staff_name),
    ("Entry", lambda v: v.entry_time),
    ("Expected exit", lambda v: v.expected_exit_time),
    ("Status", lambda v: v.status),
]

CAMERA_COLUMNS: List[Column] = [
    ("Device", lambda c: c.device_id),
    ("Name", lambda c: c.display_name),
    ("Location", lambda c: c.location_tag),
    ("Building", lambda c: c.building),
    ("Floor", lambda c: c.floor),
    ("Online", lambda c: "yes" if c.is_online else "no"),
    ("Last heartbeat", lambda c: c.last_heartbeat),
]

WHEREABOUTS_COLUMNS: List[Column] = [
    ("Student", lambda w: w.full_name or w.user_id),
    ("Class", lambda w: w.class_name),
    ("Current", lambda w: w.current_location),
    ("Expected", lambda w: w.expected_location),
    ("Match", lambda w: "yes" if w.location_match else "no"),
    ("Updated", lambda w: w.updated_at),
]

FLAGGED_COLUMNS: List[Column] = [
    ("Student", lambda f: f.student_name or f.student_id),
    ("Reason", lambda f: f.flag_reason),
    ("Absence rate", lambda f: f"{f.absence_rate:.1f}%" if f.absence_rate is not None else None),
    ("Status", lambda f: f.intervention_status),
    ("Flagged", lambda f: f.flagged_at),
]


def render_dashboard(view: models.DashboardView) -> str:
    s = view.stats
    hourly = table(
        [("Hour", lambda h: h.hour), ("Entries", lambda h: h.entries),
         ("Exits", lambda h: h.exits), ("Total", lambda h: h.total)],
        view.hourly,
        "No recent activity",
    )
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Total Students", s.total),
            ("Present", f"{s.present} ({s.present_percentage}%)"),
            ("Off Campus", s.off_campus),
            ("Unknown", s.unknown),
        ]),
        stat_cards([
            ("Entries", view.event_counts.entry),
            ("Exits", view.event_counts.exit),
            ("Meals", view.event_counts.meal),
            ("Classes", view.event_counts.class_),
        ]),
        section("Recent Activity", table(LOG_COLUMNS, view.recent_activity, "No recent activity")),
        section("Hourly Activity", hourly),
        section("Latest Anomalies", table(ANOMALY_COLUMNS, view.anomalies, "No active alerts")),
    ])


def render_action_queue(view: models.ActionQueueView) -> str:
    parts = [
        _partial_notice(view),
        stat_cards([
            ("On Campus", view.on_campus),
            ("Active Alerts", view.active_alerts),
            ("Critical", len(view.critical)),
            ("Resolved Today", view.resolved_today),
        ]),
    ]
    if not (view.critical or view.warning or view.watchlist):
        parts.append(section("Action Queue", empty_state("No active alerts")))
        return "".join(parts)

    for title, items in (
        ("Critical", view.critical),
        ("Warnings", view.warning),
        ("Watchlist", view.watchlist),
    ):
        if items:
            parts.append(section(f"{title} ({len(items)})", table(ANOMALY_COLUMNS, items, "")))
    return "".join(parts)


def render_attendance(view: models.AttendanceView) -> str:
    p = view.punctuality
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("On Campus", view.on_campus),
            ("Off Campus", view.off_campus),
            ("Entries Today", view.event_counts.entry),
            ("Exits Today", view.event_counts.exit),
        ]),
        stat_cards([
            ("On Time", p.on_time),
            ("Late (minor)", p.late_minor),
            ("Late (major)", p.late_major),
            ("Meals", view.event_counts.meal),
        ]),
        section("Today's Detections", table(LOG_COLUMNS, view.today_logs, "No recent activity")),
        section("Students", table(STUDENT_COLUMNS, view.students, "No data available")),
    ])


def render_cameras(view: models.CamerasView) -> str:
    return "".join([
        _partial_notice(view),
        stat_cards([("Cameras", len(view.cameras)), ("Online", view.online)]),
        section("Cameras", table(CAMERA_COLUMNS, view.cameras, "No cameras configured yet")),
    ])


def render_gate_security(view: models.GateSecurityView) -> str:
    requests = table(
        [("Person", lambda r: r.person_name), ("Type", lambda r: r.request_type),
         ("Reason", lambda r: r.reason), ("Urgency", lambda r: r.urgency),
         ("Requested", lambda r: r.requested_at)],
        view.pending_requests,
        "No pending approvals",
    )
    transactions = table(
        [("Time", lambda t: t.timestamp), ("Person", lambda t: t.person_name),
         ("Type", lambda t: t.transaction_type), ("Gate", lambda t: t.gate)],
        view.recent_transactions,
        "No recent transactions",
    )
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("On Campus", len(view.on_campus)),
            ("Pending", len(view.pending_requests)),
            ("Expected Exits", len(view.expected_exits)),
            ("Visitors", len(view.active_visitors)),
        ]),
        section(f"Pending Approvals ({len(view.pending_requests)})", requests),
        section("Expected Exits", table(LEAVE_COLUMNS, view.expected_exits, "No expected exits today")),
        section("Recent Transactions", transactions),
        section(
            f"Active Visitors ({len(view.active_visitors)})",
            table(VISITOR_COLUMNS, view.active_visitors, "No visitors yet"),
        ),
    ])


def render_visitors(view: models.VisitorsView) -> str:
    return "".join([
        _partial_notice(view),
        stat_cards([("Visitors", len(view.visitors)), ("On Premises", view.on_premises)]),
        section("Visitor Log", table(VISITOR_COLUMNS, view.visitors, "No visitors yet")),
    ])


def render_leave_management(view: models.LeaveManagementView) -> str:
    parts = [
        _partial_notice(view),
        stat_cards([("Pending", len(view.pending)), ("Awaiting Exit", len(view.awaiting_exit))]),
    ]
    if not view.pending and not view.awaiting_exit:
        parts.append(section("Leave Requests", empty_state("No leave requests found")))
        return "".join(parts)

    if view.pending:
        parts.append(section(
            f"Pending Approvals ({len(view.pending)})",
            table(LEAVE_COLUMNS, view.pending, ""),
        ))
    if view.awaiting_exit:
        parts.append(section(
            f"Approved - Awaiting Exit ({len(view.awaiting_exit)})",
            table(LEAVE_COLUMNS, view.awaiting_exit, ""),
        ))
    return "".join(parts)


def render_absence_requests(view: models.AbsenceRequestsView) -> str:
    columns = [
        ("Student", lambda r: r.student_name or r.student_id),
        ("Reason", lambda r: r.reason),
        ("Details", lambda r: r.description),
        ("Status", lambda r: r.approval_status),
        ("Submitted", lambda r: r.submitted_at),
    ]
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Pending", view.counts.get("pending", 0)),
            ("Approved", view.counts.get("approved", 0)),
            ("Rejected", view.counts.get("rejected", 0)),
        ]),
        section("Absence Requests", table(columns, view.requests, "No requests found")),
    ])


def render_movements(view: models.MovementsView) -> str:
    columns = [
        ("Time", lambda m: m.timestamp),
        ("Student", lambda m: m.student_name or m.student_id),
        ("Movement", lambda m: m.movement_type),
        ("Location", lambda m: m.location),
        ("Returned", lambda m: "yes" if m.return_confirmed else "no"),
        ("Late", lambda m: "yes" if m.late_return else "no"),
    ]
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Currently Out", view.currently_out),
            ("Today", view.today),
            ("Late Returns", view.late_returns),
        ]),
        section("Movements", table(columns, view.movements, "No movements recorded")),
    ])


def render_whereabouts(view: models.WhereaboutsView) -> str:
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Tracked", len(view.records)),
            ("Matched", view.matched),
            ("Discrepancies", view.discrepancies),
        ]),
        section("Whereabouts", table(WHEREABOUTS_COLUMNS, view.records, "No data available")),
    ])


def render_live_map(view: models.LiveMapView) -> str:
    if view.locations:
        groups = "".join(
            f'<div class="card p-4"><div class="font-semibold">{text(location)}'
            f' <span class="badge badge-info">{len(people)}</span></div>'
            f'<div class="text-sm text-gray-600">{", ".join(text(p.full_name or p.user_id) for p in people)}</div></div>'
            for location, people in view.locations.items()
        )
        locations = f'<div class="grid grid-cols-1 md:grid-cols-3 gap-4">{groups}</div>'
    else:
        locations = empty_state("No data available")
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Tracked", view.tracked),
            ("Locations", len(view.locations)),
            ("Cameras Online", view.cameras_online),
            ("Discrepancies", view.discrepancies),
        ]),
        section("Locations", locations),
        section("Active Cameras", table(CAMERA_COLUMNS, view.cameras, "No cameras configured yet")),
    ])


def render_system_logs(view: models.SystemLogsView) -> str:
    columns = [
        ("Time", lambda l: l.created_at),
        ("Severity", lambda l: Markup(badge(l.severity))),
        ("Type", lambda l: l.log_type),
        ("Category", lambda l: l.log_category),
        ("Message", lambda l: l.message),
    ]
    return "".join([
        _partial_notice(view),
        stat_cards([(severity.title(), count) for severity, count in sorted(view.counts.items())]),
        section("System Logs", table(columns, view.logs, "No logs found")),
    ])


def render_flagged_students(view: models.FlaggedStudentsView) -> str:
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Pending", view.counts.get("pending", 0)),
            ("In Progress", view.counts.get("in_progress", 0)),
            ("Resolved", view.counts.get("resolved", 0)),
        ]),
        section("Flagged Students", table(FLAGGED_COLUMNS, view.flagged, "No flagged students")),
    ])


def render_student_risk(view: models.StudentRiskView) -> str:
    columns = STUDENT_COLUMNS + [
        ("Risk", lambda s: s.risk_level),
        ("Score", lambda s: s.risk_score),
    ]
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Critical", view.critical),
            ("High Risk", view.high_risk),
            ("Watch", view.watch),
            ("Pending Flags", len(view.pending_flags)),
        ]),
        section("Students at Risk", table(columns, view.students, "No data available")),
        section("Pending Flags", table(FLAGGED_COLUMNS, view.pending_flags, "No flagged students")),
    ])


def render_insights(view: models.InsightsView) -> str:
    active = [i for i in view.insights if i.status.value == "active"]
    columns = [
        ("Severity", lambda i: Markup(badge(i.severity))),
        ("Type", lambda i: i.insight_type),
        ("Title", lambda i: i.title),
        ("Details", lambda i: i.description),
        ("Detected", lambda i: i.detected_at),
    ]
    return "".join([
        _partial_notice(view),
        stat_cards([
            ("Active", view.active),
            ("Critical", view.critical),
            ("Actioned", view.actioned),
            ("Recommendations", view.recommendations),
        ]),
        section("Active Insights", table(
            columns, active,
            "No active insights. Generate new insights to see AI recommendations.",
        )),
    ])


def render_chronic_absenteeism(view: models.ChronicAbsenteeismView) -> str:
    columns = [
        ("ID", lambda s: s.student_id),
        ("Name", lambda s: s.full_name),
        ("Absence rate", lambda s: f"{s.absence_rate:.1f}%"),
        ("Absences", lambda s: s.total_absences),
        ("Risk", lambda s: s.risk_level),
    ]
    return _partial_notice(view) + section(
        "Chronic Absenteeism",
        table(columns, view.students, "No students with chronic absenteeism detected"),
    )


def render_events(view: models.EventsView) -> str:
    columns = [
        ("Event", lambda e: e.event_name),
        ("Type", lambda e: e.event_type),
        ("Location", lambda e: e.event_location),
        ("Start", lambda e: e.start_datetime),
        ("End", lambda e: e.end_datetime),
        ("Participants", lambda e: e.participant_count),
        ("Status", lambda e: e.status),
    ]
    return _partial_notice(view) + section(
        "Special Events", table(columns, view.events, "No events created yet"),
    )


DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def render_timetables(view: models.TimetablesView) -> str:
    columns = [
        ("Template", lambda p: p.template_name),
        ("Day", lambda p: DAY_NAMES[p.day_of_week]),
        ("Period", lambda p: p.period_number),
        ("Name", lambda p: p.period_name),
        ("Type", lambda p: p.period_type),
        ("Start", lambda p: p.start_time),
        ("End", lambda p: p.end_time),
    ]
    return _partial_notice(view) + section(
        "Timetables", table(columns, view.periods, "No classes configured yet"),
    )
