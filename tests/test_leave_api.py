from datetime import datetime

from sentinel.shared.db.models import ApprovalStatus, LeaveApproval

from conftest import STAFF_EMAIL


def leave_body(start="2026-03-06T08:00:00", end="2026-03-06T12:00:00", **overrides):
    body = {
        "student_id": "S300",
        "student_name": "Faith Njeri",
        "class": "Form 3",
        "leave_type": "medical",
        "start_datetime": start,
        "end_datetime": end,
        "guardian_name": "Mary Njeri",
    }
    body.update(overrides)
    return body


def test_create_leave_computes_duration(client, auth_headers):
    response = client.post("/api/leave", json=leave_body(), headers=auth_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["duration_hours"] == 4
    assert data["requested_by"] == STAFF_EMAIL
    assert data["approval_status"] == "pending"
    assert data["class"] == "Form 3"


def test_partial_hours_round_up(client, auth_headers):
    response = client.post(
        "/api/leave",
        json=leave_body(end="2026-03-06T12:30:00"),
        headers=auth_headers,
    )
    assert response.json()["data"]["duration_hours"] == 5


def test_end_must_follow_start(client, auth_headers):
    response = client.post(
        "/api/leave",
        json=leave_body(start="2026-03-06T12:00:00", end="2026-03-06T08:00:00"),
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_create_leave_requires_auth(client):
    response = client.post("/api/leave", json=leave_body())
    assert response.status_code == 401


def test_list_filters_and_orders(client, seed):
    def leave(student_id, status, requested_at):
        return LeaveApproval(
            student_id=student_id,
            start_datetime=datetime(2026, 3, 6, 8),
            end_datetime=datetime(2026, 3, 6, 12),
            duration_hours=4,
            approval_status=status,
            requested_at=requested_at,
        )

    seed(
        leave("S1", ApprovalStatus.PENDING, datetime(2026, 3, 1, 9)),
        leave("S2", ApprovalStatus.APPROVED, datetime(2026, 3, 2, 9)),
        leave("S1", ApprovalStatus.APPROVED, datetime(2026, 3, 3, 9)),
    )

    everything = client.get("/api/leave").json()["data"]
    assert [l["requested_at"][:10] for l in everything] == ["2026-03-03", "2026-03-02", "2026-03-01"]

    approved_s1 = client.get("/api/leave", params={"status": "approved", "student_id": "S1"}).json()
    assert len(approved_s1["data"]) == 1
    assert approved_s1["data"][0]["requested_at"].startswith("2026-03-03")


def test_leave_management_view_empty_state(client, auth_headers):
    response = client.get("/leave-management", headers=auth_headers)
    assert response.status_code == 200
    assert "No leave requests found" in response.text
