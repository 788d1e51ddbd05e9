from sentinel.shared.db.models import (
    AbsenceRequest,
    Anomaly,
    AnomalyStatus,
    ApprovalStatus,
    FlaggedStudent,
    InterventionStatus,
    Severity,
)

from conftest import STAFF_EMAIL


def test_actions_require_auth(client):
    response = client.post("/actions/cameras", json={
        "device_id": "CAM-001", "display_name": "Main Gate", "location_tag": "gate",
    })
    assert response.status_code == 401


def test_register_camera_without_stream_url(client, auth_headers):
    before = client.get("/api/views/cameras", headers=auth_headers).json()
    assert before["cameras"] == []

    response = client.post("/actions/cameras", json={
        "device_id": "CAM-001",
        "display_name": "Main Gate",
        "location_tag": "main_gate",
        "building": "Admin Block",
    }, headers=auth_headers)

    result = response.json()
    assert response.status_code == 200
    assert result["success"] is True
    assert result["data"]["rtsp_url"] is None
    assert result["data"]["is_online"] is False

    view = client.get("/api/views/cameras", headers=auth_headers).json()
    assert [c["device_id"] for c in view["cameras"]] == ["CAM-001"]
    assert view["online"] == 0


def test_duplicate_camera_fails_without_raising(client, auth_headers):
    body = {"device_id": "CAM-002", "display_name": "Library", "location_tag": "library"}
    client.post("/actions/cameras", json=body, headers=auth_headers)

    result = client.post("/actions/cameras", json=body, headers=auth_headers).json()

    assert result["success"] is False
    assert result["message"] == "Failed to register camera"
    assert result["error"] == "Camera CAM-002 is already registered"


def test_create_timetable_template(client, auth_headers):
    result = client.post("/actions/timetables", json={
        "template_name": "Term 1",
        "day_of_week": 1,
        "period_number": 1,
        "period_name": "Mathematics",
        "period_type": "class",
        "start_time": "08:00",
        "end_time": "08:40",
    }, headers=auth_headers).json()

    assert result["success"] is True
    view = client.get("/api/views/timetables", headers=auth_headers).json()
    assert [p["period_name"] for p in view["periods"]] == ["Mathematics"]


def test_create_special_event_maps_form_fields(client, auth_headers):
    result = client.post("/actions/special-events", json={
        "event_name": "Science Fair",
        "event_type": "competition",
        "location": "Main Hall",
        "description": "Regional round",
        "start_datetime": "2026-04-10T08:00:00",
        "end_datetime": "2026-04-10T16:00:00",
        "participant_ids": ["S1", "S2", "S3"],
    }, headers=auth_headers).json()

    data = result["data"]
    assert result["success"] is True
    assert data["event_location"] == "Main Hall"
    assert data["notes"] == "Regional round"
    assert data["participant_count"] == 3
    assert data["created_by"] == STAFF_EMAIL
    assert data["status"] == "planned"


def test_decide_absence_request(client, seed, fetch, auth_headers):
    request = seed(AbsenceRequest(student_id="S1", reason="sick"))

    result = client.post("/actions/absence-requests/decide", json={
        "request_id": str(request.id),
        "decision": "reject",
        "rejection_reason": "No medical note",
    }, headers=auth_headers).json()

    assert result["success"] is True
    stored = fetch(AbsenceRequest, request.id)
    assert stored.approval_status == ApprovalStatus.REJECTED
    assert stored.rejection_reason == "No medical note"
    assert stored.approved_by == STAFF_EMAIL


def test_resolve_and_escalate_anomaly(client, seed, fetch, auth_headers):
    first, second = seed(
        Anomaly(type="late", title="Late to class", severity=Severity.WARNING),
        Anomaly(type="exit", title="Left campus", severity=Severity.WATCHLIST),
    )

    resolved = client.post(
        "/actions/anomalies/resolve", json={"anomaly_id": str(first.id)}, headers=auth_headers,
    ).json()
    escalated = client.post(
        "/actions/anomalies/escalate", json={"anomaly_id": str(second.id)}, headers=auth_headers,
    ).json()

    assert resolved["success"] and escalated["success"]
    assert fetch(Anomaly, first.id).status == AnomalyStatus.RESOLVED
    assert fetch(Anomaly, first.id).resolved_at is not None
    assert fetch(Anomaly, second.id).severity == Severity.CRITICAL


def test_unknown_anomaly_is_reported(client, auth_headers):
    result = client.post(
        "/actions/anomalies/resolve",
        json={"anomaly_id": "00000000-0000-0000-0000-000000000000"},
        headers=auth_headers,
    ).json()

    assert result == {
        "success": False,
        "message": "Anomaly not found",
        "data": None,
        "error": "not_found",
    }


def test_resolve_flagged_student(client, seed, fetch, auth_headers):
    flagged = seed(FlaggedStudent(student_id="S5", flag_reason="Chronic absence"))

    result = client.post("/actions/flagged-students/resolve", json={
        "flagged_id": str(flagged.id),
        "resolution_notes": "Parent meeting held",
    }, headers=auth_headers).json()

    assert result["success"] is True
    stored = fetch(FlaggedStudent, flagged.id)
    assert stored.intervention_status == InterventionStatus.RESOLVED
    assert stored.resolution_notes == "Parent meeting held"
