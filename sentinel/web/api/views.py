"""JSON view model endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from ...shared.db.models import LogSeverity
from ..auth.dependencies import CurrentUser
from ..views import UnknownView, get_view
from .deps import DbSession, Views

router = APIRouter()


@router.get("/views/{name}")
async def read_view(
    name: str,
    auth: CurrentUser,
    db: DbSession,
    cache: Views,
    severity: Optional[LogSeverity] = None,
    search: Optional[str] = None,
):
    """
    Get the view model behind a dashboard page.

    Clients call this again after an ``invalidate`` notice for one of the
    view's tables.
    """
    params = {
        "severity": severity.value if severity else None,
        "search": search,
    }
    try:
        view = await get_view(name, db, cache, params)
    except UnknownView:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="View not found",
        )
    return view.model_dump(mode="json", by_alias=True)
