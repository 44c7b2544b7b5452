"""Dashboard and analytics reports over the issue collection."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from civic_admin.application.services.analytics import compute_analytics, compute_dashboard
from civic_admin.domain.exceptions import ValidationException

if TYPE_CHECKING:
    from civic_admin.application.dtos.analytics import AnalyticsReport, DashboardSummary
    from civic_admin.application.interfaces.repositories import IIssueRepository

MAX_DAYS = 365


class AnalyticsService:
    def __init__(self, issue_repo: IIssueRepository) -> None:
        self.issue_repo = issue_repo

    async def dashboard(self, now: datetime) -> DashboardSummary:
        return compute_dashboard(await self.issue_repo.list_all(), now)

    async def report(
        self, days: int, now: datetime, department: str | None = None
    ) -> AnalyticsReport:
        if not 1 <= days <= MAX_DAYS:
            raise ValidationException(f"days must be between 1 and {MAX_DAYS}", field="days")
        return compute_analytics(await self.issue_repo.list_all(), days, now, department or None)
