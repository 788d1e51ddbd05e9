"""Attendance pipeline API endpoints."""

from fastapi import APIRouter, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ...shared.db.models import Student, PresenceStatus
from ...shared.db.repositories import StudentRepository, SystemLogRepository
from ...shared.schemas.student import AutoRegisterRequest, StudentResponse
from .deps import DbSession, Changes, run_dependent_write

router = APIRouter()

UNASSIGNED = "Unassigned"


@router.post("/auto-register")
async def auto_register(
    body: AutoRegisterRequest,
    db: DbSession,
    changes: Changes,
):
    """
    Create a student from an unknown camera detection.

    An existing student is reported back unchanged. The audit log entry is
    written after the student and may be missing if that write fails.
    """
    if not body.person_id or not body.person_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="person_id and person_name required",
        )

    repo = StudentRepository(db)
    existing = await repo.get_by_student_id(body.person_id)
    if existing:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=jsonable_encoder({
                "message": "Student already exists",
                "student_id": existing.id,
            }),
        )

    student = await repo.create(Student(
        student_id=body.person_id,
        full_name=body.person_name,
        photo_url=body.photo_url,
        face_descriptor=body.face_descriptor,
        status=PresenceStatus.UNKNOWN,
        grade=UNASSIGNED,
        class_name=UNASSIGNED,
    ))
    await db.commit()
    await changes.publish("students", "insert", student.id)

    logged = await run_dependent_write(
        db,
        "auto-registration audit log",
        lambda: SystemLogRepository(db).log(
            log_type="student_auto_registration",
            log_category="attendance",
            message=(
                "Student auto-registered from camera detection: "
                f"{body.person_name} ({body.person_id})"
            ),
            details={
                "student_id": str(student.id),
                "person_id": body.person_id,
                "camera_id": body.camera_id,
                "source": "attendance_detection",
            },
        ),
    )
    if logged:
        await changes.publish("system_logs", "insert")

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder({
            "success": True,
            "student": StudentResponse.model_validate(student).model_dump(by_alias=True),
            "message": "Student auto-registered successfully",
        }),
    )
