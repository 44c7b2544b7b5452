"""Health check endpoints. No auth; used for liveness and readiness probes."""

from fastapi import APIRouter, Request

from civic_admin.core.config import get_settings
from civic_admin.infrastructure.firebase.client import get_firestore_client
from civic_admin.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
def readiness_check(request: Request) -> ReadinessResponse:
    """Report which backing services are configured.

    Status is ``degraded`` without Firestore: the app serves health and the
    landing page but data routes answer 503.
    """
    firestore = get_firestore_client() is not None
    task = getattr(request.app.state, "auto_assign_task", None)
    return ReadinessResponse(
        status="ok" if firestore else "degraded",
        firestore=firestore,
        image_analysis=get_settings().image_analysis_enabled,
        auto_assign_worker=task is not None and not task.done(),
    )
