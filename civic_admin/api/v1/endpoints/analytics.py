"""Dashboard and analytics API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from civic_admin.api.v1.dependencies import StaffUser, get_analytics_service
from civic_admin.application.use_cases.analytics import MAX_DAYS, AnalyticsService
from civic_admin.core.config import get_settings
from civic_admin.schemas.analytics import AnalyticsResponse, DashboardResponse
from civic_admin.shared.utils.datetime import utc_now

router = APIRouter()

AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(_: StaffUser, service: AnalyticsServiceDep):
    """Headline counts, month-over-month changes, 14-day trend and recent issues."""
    return DashboardResponse.model_validate(await service.dashboard(utc_now()))


@router.get("", response_model=AnalyticsResponse)
async def analytics(
    _: StaffUser,
    service: AnalyticsServiceDep,
    days: int | None = Query(default=None, ge=1, le=MAX_DAYS),
    department: str | None = None,
):
    """Figures over the last ``days`` days (default from settings)."""
    window = days or get_settings().analytics_default_days
    report = await service.report(window, utc_now(), department)
    return AnalyticsResponse.model_validate(report)
