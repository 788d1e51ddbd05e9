"""Dashboard page routes.

Each page is rendered on the server from its view model and reloads itself
when the change stream reports a write to one of the view's tables.
"""

from typing import Callable, Dict, Optional, Tuple

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from ..shared.db.models import LogSeverity
from ..shared.schemas import views as models
from .api.deps import DbSession, Views
from .auth.dependencies import AuthContext, PageUser
from .views import VIEWS, get_view
from . import dashboard

router = APIRouter()

# Path -> (view name, page title, renderer)
PAGES: Dict[str, Tuple[str, str, Callable[..., str]]] = {
    "/dashboard": ("dashboard", "Dashboard", dashboard.render_dashboard),
    "/attendance": ("attendance", "Attendance", dashboard.render_attendance),
    "/gate-security": ("gate-security", "Gate Security", dashboard.render_gate_security),
    "/gate-security/visitors": ("visitors", "Visitors", dashboard.render_visitors),
    "/leave-management": ("leave-management", "Leave Management", dashboard.render_leave_management),
    "/admin/action-queue": ("action-queue", "Action Queue", dashboard.render_action_queue),
    "/admin/cameras": ("cameras", "Cameras", dashboard.render_cameras),
    "/admin/absence-requests": ("absence-requests", "Absence Requests", dashboard.render_absence_requests),
    "/admin/student-movements": ("student-movements", "Student Movements", dashboard.render_movements),
    "/admin/whereabouts": ("whereabouts", "Whereabouts", dashboard.render_whereabouts),
    "/admin/live-map": ("live-map", "Live Map", dashboard.render_live_map),
    "/admin/flagged-students": ("flagged-students", "Flagged Students", dashboard.render_flagged_students),
    "/admin/student-risk": ("student-risk", "Student Risk", dashboard.render_student_risk),
    "/admin/insights": ("insights", "Insights", dashboard.render_insights),
    "/admin/chronic-absenteeism": (
        "chronic-absenteeism", "Chronic Absenteeism", dashboard.render_chronic_absenteeism,
    ),
    "/admin/events": ("events", "Special Events", dashboard.render_events),
    "/admin/timetables": ("timetables", "Timetables", dashboard.render_timetables),
}


def render(name: str, title: str, view: models.View, renderer, auth: AuthContext) -> HTMLResponse:
    content = renderer(view)
    return HTMLResponse(content=dashboard.render_page(
        title,
        content,
        auth.email or auth.user_id,
        VIEWS[name].tables,
    ))


def _page_route(name: str, title: str, renderer) -> Callable:
    async def page(auth: PageUser, db: DbSession, cache: Views) -> HTMLResponse:
        view = await get_view(name, db, cache)
        return render(name, title, view, renderer, auth)

    page.__name__ = f"{name.replace('-', '_')}_page"
    page.__doc__ = f"Serve the {title.lower()} page."
    return page


for _path, (_name, _title, _renderer) in PAGES.items():
    router.add_api_route(
        _path,
        _page_route(_name, _title, _renderer),
        methods=["GET"],
        response_class=HTMLResponse,
        include_in_schema=False,
    )


@router.get("/admin/system-logs", response_class=HTMLResponse, include_in_schema=False)
async def system_logs_page(
    auth: PageUser,
    db: DbSession,
    cache: Views,
    severity: Optional[LogSeverity] = None,
    search: Optional[str] = None,
):
    """Serve the system logs page, filtered by severity and message search."""
    params = {
        "severity": severity.value if severity else None,
        "search": search,
    }
    view = await get_view("system-logs", db, cache, params)
    return render("system-logs", "System Logs", view, dashboard.render_system_logs, auth)
