from datetime import datetime

import pytest

from sentinel.shared.db.models import (
    Anomaly,
    CameraMetadata,
    LogSeverity,
    Severity,
    SystemLog,
)

from conftest import make_token

EMPTY_STATES = [
    ("/dashboard", "No recent activity"),
    ("/admin/action-queue", "No active alerts"),
    ("/admin/absence-requests", "No requests found"),
    ("/admin/cameras", "No cameras configured yet"),
    ("/gate-security", "No recent transactions"),
    ("/gate-security", "No expected exits today"),
    ("/gate-security/visitors", "No visitors yet"),
    ("/leave-management", "No leave requests found"),
    ("/admin/student-movements", "No movements recorded"),
    ("/admin/whereabouts", "No data available"),
    ("/admin/system-logs", "No logs found"),
    ("/admin/flagged-students", "No flagged students"),
    ("/admin/insights", "No active insights. Generate new insights to see AI recommendations."),
    ("/admin/chronic-absenteeism", "No students with chronic absenteeism detected"),
    ("/admin/events", "No events created yet"),
    ("/admin/timetables", "No classes configured yet"),
]


@pytest.mark.parametrize("path,message", EMPTY_STATES)
def test_empty_states(client, auth_headers, path, message):
    response = client.get(path, headers=auth_headers)

    assert response.status_code == 200
    assert message in response.text


@pytest.mark.parametrize("path", ["/attendance", "/admin/live-map", "/admin/student-risk"])
def test_other_pages_render(client, auth_headers, path):
    response = client.get(path, headers=auth_headers)
    assert response.status_code == 200
    assert "SmartSchool Sentinel" in response.text


def test_pages_redirect_to_login_without_session(client):
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/auth/login"


def test_expired_session_redirects(client):
    client.cookies.set("session", make_token(expires_in=-60))

    response = client.get("/admin/cameras", follow_redirects=False)

    assert response.status_code == 302


def test_session_cookie_is_accepted(client):
    client.cookies.set("session", make_token())

    response = client.get("/admin/cameras", follow_redirects=False)

    assert response.status_code == 200


def test_api_views_require_auth(client):
    response = client.get("/api/views/dashboard")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_unknown_view_is_404(client, auth_headers):
    response = client.get("/api/views/nope", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "View not found"}


def test_action_queue_counts(client, seed, auth_headers):
    seed(
        Anomaly(type="t", title="c", severity=Severity.CRITICAL),
        Anomaly(type="t", title="w1", severity=Severity.WARNING),
        Anomaly(type="t", title="w2", severity=Severity.WARNING),
        Anomaly(type="t", title="watch", severity=Severity.WATCHLIST),
    )

    view = client.get("/api/views/action-queue", headers=auth_headers).json()

    assert view["active_alerts"] == len(view["critical"]) + len(view["warning"]) == 3
    assert len(view["watchlist"]) == 1

    page = client.get("/admin/action-queue", headers=auth_headers).text
    assert "No active alerts" not in page
    assert "Critical (1)" in page


def test_page_escapes_values(client, seed, auth_headers):
    seed(CameraMetadata(device_id="CAM-9", display_name="<script>x</script>", location_tag="lab"))

    page = client.get("/admin/cameras", headers=auth_headers).text

    assert "&lt;script&gt;x&lt;/script&gt;" in page
    assert "<script>x</script>" not in page


def test_system_logs_filters(client, seed, auth_headers):
    seed(
        SystemLog(log_type="camera_offline", log_category="devices",
                  message="Camera CAM-1 offline", severity=LogSeverity.ERROR,
                  created_at=datetime(2026, 3, 2, 8)),
        SystemLog(log_type="login", log_category="auth",
                  message="Admin signed in", severity=LogSeverity.INFO,
                  created_at=datetime(2026, 3, 2, 9)),
    )

    errors = client.get(
        "/api/views/system-logs", params={"severity": "error"}, headers=auth_headers,
    ).json()
    assert [l["message"] for l in errors["logs"]] == ["Camera CAM-1 offline"]

    searched = client.get(
        "/admin/system-logs", params={"search": "signed"}, headers=auth_headers,
    ).text
    assert "Admin signed in" in searched
    assert "Camera CAM-1 offline" not in searched


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
