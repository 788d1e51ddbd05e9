"""API module."""

from fastapi import APIRouter

from .anomalies import router as anomalies_router
from .gate import router as gate_router
from .interventions import router as interventions_router
from .leave import router as leave_router
from .attendance import router as attendance_router
from .students import router as students_router
from .sse import router as sse_router
from .views import router as views_router
from .actions import router as actions_router

# Create main API router
router = APIRouter(prefix="/api")

# Include sub-routers
router.include_router(anomalies_router, prefix="/anomalies", tags=["anomalies"])
router.include_router(gate_router, prefix="/gate", tags=["gate"])
router.include_router(interventions_router, prefix="/interventions", tags=["interventions"])
router.include_router(leave_router, prefix="/leave", tags=["leave"])
router.include_router(attendance_router, prefix="/attendance", tags=["attendance"])
router.include_router(students_router, prefix="/students", tags=["students"])
router.include_router(views_router, tags=["views"])
router.include_router(sse_router, tags=["sse"])

__all__ = ["router", "actions_router"]
