"""Student registry API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response, status
from starlette.concurrency import run_in_threadpool

from ...core.aggregation import collect_unregistered
from ...core.export import build_photo_archive, archive_filename
from ...shared.db.models import RegistryEntry, PersonType, PresenceStatus
from ...shared.db.repositories import (
    RegistryRepository,
    StudentRepository,
    AttendanceLogRepository,
)
from ...shared.schemas.student import (
    RegistryCreate,
    RegistryUpdate,
    RegistryResponse,
    RegistrySummary,
    SyncStatus,
    SyncResult,
    UnregisteredRegister,
    UnregisteredPerson,
    UnregisteredList,
)
from ..auth.dependencies import CurrentUser
from .deps import DbSession, Changes

logger = logging.getLogger(__name__)

router = APIRouter()

UNASSIGNED = "Unassigned"
SYNC_PREVIEW_SIZE = 20


@router.post("", response_model=RegistryResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    body: RegistryCreate,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """
    Add a student to the registry.
    """
    entry = await RegistryRepository(db).create(RegistryEntry(
        **body.model_dump(),
        person_type=PersonType.STUDENT,
        is_active=True,
    ))
    await db.commit()
    await changes.publish("user_registry", "insert", entry.id)

    return RegistryResponse.model_validate(entry)


@router.put("", response_model=RegistryResponse)
async def update_student(
    body: RegistryUpdate,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """
    Update a registry entry by its external id.
    """
    repo = RegistryRepository(db)
    entry = await repo.get_by_user_id(body.user_id)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )

    for field, value in body.model_dump(exclude_unset=True, exclude={"user_id"}).items():
        setattr(entry, field, value)

    entry = await repo.update(entry)
    await db.commit()
    await changes.publish("user_registry", "update", entry.id)

    return RegistryResponse.model_validate(entry)


@router.delete("")
async def delete_student(
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
    user_id: Optional[str] = None,
):
    """
    Remove a student from the registry.
    """
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID required",
        )

    await RegistryRepository(db).delete_by_user_id(user_id)
    await db.commit()
    await changes.publish("user_registry", "delete", user_id)

    return {"success": True}


@router.get("/sync-registry", response_model=SyncStatus)
async def get_sync_status(
    auth: CurrentUser,
    db: DbSession,
):
    """
    Report how many students the registry holds.

    The registry is the only roster, so nothing ever needs syncing.
    """
    repo = RegistryRepository(db)
    total = await repo.count_students()
    preview = await repo.get_students(limit=SYNC_PREVIEW_SIZE)

    return SyncStatus(
        totalStudents=total,
        inRegistry=total,
        needsSync=0,
        students=[RegistrySummary.model_validate(s) for s in preview],
    )


@router.post("/sync-registry", response_model=SyncResult)
async def run_sync(auth: CurrentUser):
    return SyncResult(
        message="No separate students table exists - user_registry is the primary table",
        synced=0,
    )


@router.get("/unregistered", response_model=UnregisteredList)
async def list_unregistered(
    auth: CurrentUser,
    db: DbSession,
):
    """
    People detected by the cameras who are not in the registry yet.
    """
    logs = await AttendanceLogRepository(db).get_for_person_type(PersonType.STUDENT.value)
    registered = await RegistryRepository(db).student_ids()

    unregistered = [
        UnregisteredPerson.model_validate(item, from_attributes=True)
        for item in collect_unregistered(logs, registered)
    ]
    return UnregisteredList(count=len(unregistered), unregistered=unregistered)


@router.post("/unregistered", status_code=status.HTTP_201_CREATED)
async def register_detected(
    body: UnregisteredRegister,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
):
    """
    Register a detected person as a student.
    """
    if not body.user_id or not body.user_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="user_id and user_name required",
        )

    entry = await RegistryRepository(db).create(RegistryEntry(
        user_id=body.user_id,
        full_name=body.user_name,
        person_type=PersonType.STUDENT,
        class_name=body.class_name or UNASSIGNED,
        stream=body.stream or UNASSIGNED,
        grade=UNASSIGNED,
        photo_url=body.photo_url,
        current_status=PresenceStatus.ON_CAMPUS,
        is_active=True,
    ))
    await db.commit()
    await changes.publish("user_registry", "insert", entry.id)

    return {
        "success": True,
        "message": "Student registered successfully",
        "student": RegistryResponse.model_validate(entry).model_dump(mode="json", by_alias=True),
    }


@router.get("/bulk-download-images")
async def bulk_download_images(
    request: Request,
    auth: CurrentUser,
    db: DbSession,
):
    """
    Download every student photo as a ZIP archive.
    """
    students = await StudentRepository(db).get_with_photos()
    if not students:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No students with photos found",
        )

    timeout = request.app.state.config.EXPORT_FETCH_TIMEOUT
    archive = await run_in_threadpool(build_photo_archive, students, timeout)

    return Response(
        content=archive.content,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{archive_filename()}"',
        },
    )
