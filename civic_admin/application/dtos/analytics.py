"""DTOs for dashboard, analytics and SLA figures (no dependency on storage)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from civic_admin.domain.entities.issue import Issue


@dataclass(frozen=True)
class CountItem:
    """Named counter used for category and distribution charts."""

    name: str
    count: int


@dataclass(frozen=True)
class DailyTrend:
    """One calendar day (UTC) of reported issues, oldest first."""

    date: date
    reported: int = 0
    resolved: int = 0
    in_progress: int = 0
    open: int = 0
    cumulative: int = 0


@dataclass(frozen=True)
class DepartmentPerformance:
    department: str
    short_name: str
    total: int
    resolved: int
    open: int
    in_progress: int
    resolve_rate: int
    avg_response_time: float


@dataclass(frozen=True)
class TopReporter:
    name: str
    email: str
    count: int


@dataclass(frozen=True)
class AreaStats:
    area: str
    total: int
    resolved: int
    open: int
    resolve_rate: int


@dataclass
class AnalyticsReport:
    """Figures for the analytics page over a trailing window of ``days``."""

    days: int
    department: str | None
    total_issues: int
    resolved_issues: int
    resolution_rate: int
    avg_response_time: float
    active_reporters: int
    daily_trends: list[DailyTrend] = field(default_factory=list)
    department_performance: list[DepartmentPerformance] = field(default_factory=list)
    priority_distribution: list[CountItem] = field(default_factory=list)
    status_distribution: list[CountItem] = field(default_factory=list)
    top_categories: list[CountItem] = field(default_factory=list)
    top_reporters: list[TopReporter] = field(default_factory=list)
    top_areas: list[AreaStats] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardTrend:
    date: date
    reported: int
    resolved: int


@dataclass(frozen=True)
class DashboardDepartment:
    name: str
    total: int
    resolved: int
    open: int


@dataclass(frozen=True)
class PercentageChanges:
    """Current calendar month against the previous one."""

    issues: int
    resolved: int
    pending: int


@dataclass
class DashboardSummary:
    total: int
    open: int
    in_progress: int
    resolved: int
    changes: PercentageChanges
    sla_compliance: int
    avg_resolution_hours: int
    status_distribution: list[CountItem] = field(default_factory=list)
    trend: list[DashboardTrend] = field(default_factory=list)
    top_departments: list[DashboardDepartment] = field(default_factory=list)
    categories: list[CountItem] = field(default_factory=list)
    recent_issues: list[Issue] = field(default_factory=list)


@dataclass(frozen=True)
class SlaStatus:
    """SLA position of one issue. ``remaining_hours`` is negative once breached."""

    issue_id: str
    priority: str
    deadline_hours: int
    elapsed_hours: float
    remaining_hours: float
    done: bool
    breached: bool
    at_risk: bool
