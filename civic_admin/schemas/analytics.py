"""Dashboard and analytics API schemas."""

import datetime as dt

from pydantic import BaseModel, ConfigDict

from civic_admin.schemas.issue import IssueResponse


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CountItemSchema(_FromAttributes):
    name: str
    count: int


class DailyTrendSchema(_FromAttributes):
    date: dt.date
    reported: int
    resolved: int
    in_progress: int
    open: int
    cumulative: int


class DepartmentPerformanceSchema(_FromAttributes):
    department: str
    short_name: str
    total: int
    resolved: int
    open: int
    in_progress: int
    resolve_rate: int
    avg_response_time: float


class TopReporterSchema(_FromAttributes):
    name: str
    email: str
    count: int


class AreaStatsSchema(_FromAttributes):
    area: str
    total: int
    resolved: int
    open: int
    resolve_rate: int


class AnalyticsResponse(_FromAttributes):
    days: int
    department: str | None = None
    total_issues: int
    resolved_issues: int
    resolution_rate: int
    avg_response_time: float
    active_reporters: int
    daily_trends: list[DailyTrendSchema]
    department_performance: list[DepartmentPerformanceSchema]
    priority_distribution: list[CountItemSchema]
    status_distribution: list[CountItemSchema]
    top_categories: list[CountItemSchema]
    top_reporters: list[TopReporterSchema]
    top_areas: list[AreaStatsSchema]


class DashboardTrendSchema(_FromAttributes):
    date: dt.date
    reported: int
    resolved: int


class DashboardDepartmentSchema(_FromAttributes):
    name: str
    total: int
    resolved: int
    open: int


class PercentageChangesSchema(_FromAttributes):
    issues: int
    resolved: int
    pending: int


class DashboardResponse(_FromAttributes):
    total: int
    open: int
    in_progress: int
    resolved: int
    changes: PercentageChangesSchema
    sla_compliance: int
    avg_resolution_hours: int
    status_distribution: list[CountItemSchema]
    trend: list[DashboardTrendSchema]
    top_departments: list[DashboardDepartmentSchema]
    categories: list[CountItemSchema]
    recent_issues: list[IssueResponse]
