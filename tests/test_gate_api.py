from datetime import timedelta
from uuid import UUID

from sentinel.shared.db.models import (
    GateApprovalRequest,
    GateRequestStatus,
    Visitor,
    utcnow,
)

from conftest import STAFF_EMAIL


def pending_request(**overrides):
    values = dict(person_id="S200", person_name="Amani Otieno", request_type="exit",
                  reason="Dentist appointment", urgency="medium")
    values.update(overrides)
    return GateApprovalRequest(**values)


def test_approve_requires_auth(client, seed):
    request = seed(pending_request())

    response = client.post("/api/gate/approve", json={"request_id": str(request.id)})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_approve_sets_approver_and_time(client, seed, fetch, auth_headers):
    request = seed(pending_request())

    response = client.post(
        "/api/gate/approve", json={"request_id": str(request.id)}, headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "approved"
    assert data["approved_by"] == STAFF_EMAIL
    assert data["approved_at"] is not None

    stored = fetch(GateApprovalRequest, request.id)
    assert stored.status == GateRequestStatus.APPROVED


def test_reapproving_keeps_original_approval_time(client, seed, fetch, auth_headers):
    approved_at = utcnow() - timedelta(hours=1)
    request = seed(pending_request(
        status=GateRequestStatus.APPROVED,
        approved_by="first@school.test",
        approved_at=approved_at,
    ))

    response = client.post(
        "/api/gate/approve", json={"request_id": str(request.id)}, headers=auth_headers,
    )

    assert response.status_code == 200
    stored = fetch(GateApprovalRequest, request.id)
    assert stored.approved_at == approved_at
    assert stored.approved_by == "first@school.test"


def test_cannot_approve_denied_request(client, seed, auth_headers):
    request = seed(pending_request(status=GateRequestStatus.DENIED))

    response = client.post(
        "/api/gate/approve", json={"request_id": str(request.id)}, headers=auth_headers,
    )

    assert response.status_code == 409
    assert response.json() == {"error": "Gate request already denied"}


def test_deny_records_reason(client, seed, auth_headers):
    request = seed(pending_request())

    response = client.post(
        "/api/gate/deny",
        json={"request_id": str(request.id), "denial_reason": "No guardian consent"},
        headers=auth_headers,
    )

    data = response.json()["data"]
    assert data["status"] == "denied"
    assert data["denial_reason"] == "No guardian consent"


def test_unknown_request_is_404(client, auth_headers):
    response = client.post(
        "/api/gate/approve",
        json={"request_id": "00000000-0000-0000-0000-000000000000"},
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Gate request not found"}


def test_register_visitor_defaults(client, fetch, auth_headers):
    response = client.post(
        "/api/gate/visitors/register",
        json={"full_name": "Grace Wanjiru", "purpose": "Parent meeting"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["entry_gate"] == "Main Gate"
    assert data["status"] == "on_premises"
    assert data["approved_by"] == STAFF_EMAIL

    visitor = fetch(Visitor, UUID(data["id"]))
    assert visitor.expected_exit_time - visitor.entry_time == timedelta(hours=2)


def test_gate_security_view_lists_pending_and_visitors(client, seed, auth_headers):
    seed(pending_request(person_name="Brian Kip"))
    seed(Visitor(full_name="Visiting Inspector", purpose="Inspection"))

    view = client.get("/api/views/gate-security", headers=auth_headers).json()

    assert [r["person_name"] for r in view["pending_requests"]] == ["Brian Kip"]
    assert [v["full_name"] for v in view["active_visitors"]] == ["Visiting Inspector"]
    assert view["recent_transactions"] == []
