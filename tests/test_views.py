from types import SimpleNamespace
from uuid import uuid4

from sqlalchemy import text

from sentinel.shared.db.models import Anomaly, Severity, SystemLog
from sentinel.shared.schemas.camera import CameraResponse
from sentinel.web.views import _Queries


def test_search_results_are_not_cached(client, seed, auth_headers):
    seed(SystemLog(log_type="login", log_category="auth", message="Admin signed in"))
    cache = client.app.state.view_cache

    for i in range(50):
        response = client.get(
            "/api/views/system-logs", params={"search": f"term{i}"}, headers=auth_headers,
        )
        assert response.status_code == 200
    assert len(cache) == 0

    found = client.get(
        "/api/views/system-logs", params={"search": "signed"}, headers=auth_headers,
    ).json()
    assert [log["message"] for log in found["logs"]] == ["Admin signed in"]

    client.get("/api/views/system-logs", params={"severity": "info"}, headers=auth_headers)
    assert len(cache) == 1


def test_unknown_stored_enum_value_gives_partial_view(client, seed, engine, auth_headers):
    seed(Anomaly(type="location", title="Out of bounds", severity=Severity.CRITICAL))
    with engine.begin() as conn:
        conn.execute(text("UPDATE anomalies SET severity = 'apocalyptic'"))

    view = client.get("/api/views/action-queue", headers=auth_headers).json()
    assert view["partial"] is True
    assert view["critical"] == []
    assert len(client.app.state.view_cache) == 0

    page = client.get("/admin/action-queue", headers=auth_headers)
    assert page.status_code == 200
    assert "No active alerts" in page.text
    assert "Some data could not be loaded." in page.text


def test_unreadable_rows_are_skipped():
    q = _Queries(db=None)
    good = SimpleNamespace(
        id=uuid4(), device_id="CAM-1", display_name="Gate", location_tag="gate",
        building=None, floor=None, rtsp_url=None, is_active=True, is_online=False,
        last_heartbeat=None, created_at="2026-03-02T08:00:00",
    )
    broken = SimpleNamespace(id=uuid4(), device_id="CAM-2")

    rows = q.dump(CameraResponse, [good, broken])

    assert [row.device_id for row in rows] == ["CAM-1"]
    assert q.partial is True
