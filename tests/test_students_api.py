import io
import zipfile
from datetime import datetime

import requests
from sqlalchemy.orm import Session

from sentinel.shared.db.models import (
    AttendanceLog,
    RegistryEntry,
    Student,
    SystemLog,
)


class FakeResponse:
    def __init__(self, content):
        self.content = content

    def raise_for_status(self):
        pass


def test_create_student_accepts_class_alias(client, auth_headers):
    response = client.post("/api/students", json={
        "student_id": "S400",
        "full_name": "Kevin Mutua",
        "class": "Form 2",
        "stream": "East",
    }, headers=auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == "S400"
    assert data["class"] == "Form 2"
    assert data["person_type"] == "student"
    assert data["current_status"] == "unknown"


def test_update_missing_student_is_404(client, auth_headers):
    response = client.put(
        "/api/students", json={"user_id": "nobody", "full_name": "X"}, headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Student not found"}


def test_update_student(client, seed, auth_headers):
    seed(RegistryEntry(user_id="S401", full_name="Lucy Achieng"))

    response = client.put("/api/students", json={
        "user_id": "S401", "current_status": "on_campus", "house": "Kilimanjaro",
    }, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["current_status"] == "on_campus"
    assert response.json()["house"] == "Kilimanjaro"
    assert response.json()["full_name"] == "Lucy Achieng"


def test_delete_requires_user_id(client, auth_headers):
    response = client.delete("/api/students", headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "User ID required"}


def test_delete_student(client, seed, auth_headers):
    seed(RegistryEntry(user_id="S402", full_name="Peter Kamau"))

    response = client.delete("/api/students", params={"user_id": "S402"}, headers=auth_headers)

    assert response.json() == {"success": True}
    status = client.get("/api/students/sync-registry", headers=auth_headers).json()
    assert status["totalStudents"] == 0


def test_sync_registry_status(client, seed, auth_headers):
    seed(*[RegistryEntry(user_id=f"S{i:03d}", full_name=f"Student {i:03d}") for i in range(25)])

    status = client.get("/api/students/sync-registry", headers=auth_headers).json()

    assert status["totalStudents"] == 25
    assert status["inRegistry"] == 25
    assert status["needsSync"] == 0
    assert len(status["students"]) == 20

    result = client.post("/api/students/sync-registry", headers=auth_headers).json()
    assert result["synced"] == 0


def test_unregistered_detections(client, seed, auth_headers):
    seed(
        RegistryEntry(user_id="S500", full_name="Known Student"),
        AttendanceLog(user_id="S500", person_type="student", event_type="entry"),
        AttendanceLog(user_id="U1", user_name="Unknown One", person_type="student",
                      event_type="entry", timestamp=datetime(2026, 3, 2, 7)),
        AttendanceLog(user_id="U1", user_name="Unknown One", person_type="student",
                      event_type="exit", timestamp=datetime(2026, 3, 2, 16)),
        AttendanceLog(user_id="V1", person_type="visitor", event_type="entry"),
    )

    result = client.get("/api/students/unregistered", headers=auth_headers).json()

    assert result["count"] == 1
    assert result["unregistered"][0]["user_id"] == "U1"
    assert result["unregistered"][0]["detection_count"] == 2


def test_register_detected_person(client, auth_headers):
    missing = client.post(
        "/api/students/unregistered", json={"user_id": "U2"}, headers=auth_headers,
    )
    assert missing.status_code == 400

    response = client.post("/api/students/unregistered", json={
        "user_id": "U2", "user_name": "New Face",
    }, headers=auth_headers)

    assert response.status_code == 201
    student = response.json()["student"]
    assert student["class"] == "Unassigned"
    assert student["grade"] == "Unassigned"
    assert student["current_status"] == "on_campus"


def test_auto_register_validation(client):
    response = client.post("/api/attendance/auto-register", json={"person_id": "P1"})
    assert response.status_code == 400
    assert response.json() == {"error": "person_id and person_name required"}


def test_auto_register_creates_student_and_log(client, engine):
    response = client.post("/api/attendance/auto-register", json={
        "person_id": "P100",
        "person_name": "Janet Auma",
        "camera_id": "CAM-001",
        "face_descriptor": [0.1, 0.2],
    })

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["student"]["class"] == "Unassigned"
    assert body["student"]["status"] == "unknown"

    with Session(engine) as session:
        logs = session.query(SystemLog).all()
        assert len(logs) == 1
        assert logs[0].log_type == "student_auto_registration"
        assert logs[0].details["person_id"] == "P100"


def test_auto_register_existing_student(client, seed):
    student = seed(Student(student_id="P101", full_name="Already Here"))

    response = client.post("/api/attendance/auto-register", json={
        "person_id": "P101", "person_name": "Already Here",
    })

    assert response.status_code == 200
    assert response.json() == {"message": "Student already exists", "student_id": str(student.id)}


def test_bulk_download_without_photos_is_404(client, seed, auth_headers):
    seed(Student(student_id="P1", full_name="No Photo"))

    response = client.get("/api/students/bulk-download-images", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "No students with photos found"}


def test_bulk_download_skips_unreachable_photos(client, seed, auth_headers, monkeypatch):
    seed(*[
        Student(student_id=f"P{i}", full_name=f"Student {i}",
                photo_url=f"https://photos.school.test/{i}.png")
        for i in range(5)
    ])

    def fake_get(url, timeout):
        if url.endswith("/3.png"):
            raise requests.ConnectionError("unreachable")
        return FakeResponse(b"image-bytes")

    monkeypatch.setattr("sentinel.core.export.requests.get", fake_get)

    response = client.get("/api/students/bulk-download-images", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert "attachment; filename=\"student-photos-" in response.headers["content-disposition"]
    names = zipfile.ZipFile(io.BytesIO(response.content)).namelist()
    assert len(names) == 4
    assert "student-photos/P0_Student_0.png" in names
