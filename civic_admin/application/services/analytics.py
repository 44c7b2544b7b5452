"""Dashboard and analytics aggregation over an in-memory list of issues.

All functions are pure: callers fetch issues once and pass ``now`` so the
figures are reproducible. Day buckets use UTC calendar dates.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from civic_admin.application.dtos.analytics import (
    AnalyticsReport,
    AreaStats,
    CountItem,
    DailyTrend,
    DashboardDepartment,
    DashboardSummary,
    DashboardTrend,
    DepartmentPerformance,
    PercentageChanges,
    SlaStatus,
    TopReporter,
)
from civic_admin.application.dtos.department import DepartmentStats
from civic_admin.application.dtos.notification import CommunicationAnalytics
from civic_admin.domain.enums import IssuePriority, IssueStatus
from civic_admin.shared.utils.datetime import days_between

if TYPE_CHECKING:
    from civic_admin.domain.entities.issue import Issue
    from civic_admin.domain.entities.notification import NotificationLog

UNASSIGNED = "Unassigned"
UNKNOWN_AREA = "Unknown Area"
TOP_N = 10

SLA_HOURS: dict[IssuePriority, int] = {
    IssuePriority.CRITICAL: 4,
    IssuePriority.HIGH: 24,
    IssuePriority.MEDIUM: 48,
    IssuePriority.LOW: 72,
}
SLA_AT_RISK_FRACTION = 0.25
SLA_COMPLIANCE_HOURS = 48

_AREA_PATTERNS = (
    re.compile(r"Block [A-Z]", re.IGNORECASE),
    re.compile(r"Sector \d+", re.IGNORECASE),
    re.compile(r"Phase \d+", re.IGNORECASE),
    re.compile(r"Colony .+?(?:,|$)", re.IGNORECASE),
)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a dashboard would (0.5 goes up), not banker's rounding."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def resolution_rate(resolved: int, total: int) -> int:
    """Percentage of resolved issues, 0 for an empty set."""
    if total <= 0:
        return 0
    return int(round_half_up(resolved / total * 100))


def percentage_change(current: int, previous: int) -> int:
    """Whole-number percentage change; 100 when growing from zero."""
    if previous == 0:
        return 100 if current > 0 else 0
    return int(round_half_up((current - previous) / previous * 100))


def response_time_days(issue: Issue) -> int | None:
    """Days from report to last update, rounded up.

    None while the issue is Open or when either timestamp is missing.
    """
    if issue.status == IssueStatus.OPEN:
        return None
    if issue.reported_at is None or issue.last_updated is None:
        return None
    return days_between(issue.reported_at, issue.last_updated)


def average_response_time(issues: Iterable[Issue]) -> float:
    """Mean response time in days to one decimal, 0.0 when nothing qualifies."""
    times = [t for t in (response_time_days(i) for i in issues) if t is not None]
    if not times:
        return 0.0
    return round_half_up(sum(times) / len(times), 1)


def extract_area(address: str | None) -> str:
    """Neighbourhood label for the geographic breakdown."""
    if not address or not address.strip():
        return UNKNOWN_AREA
    for pattern in _AREA_PATTERNS:
        match = pattern.search(address)
        if match:
            return match.group(0).rstrip(",").strip()
    parts = address.split(",")
    area = parts[1].strip() if len(parts) > 1 else parts[0].strip()
    return area or UNKNOWN_AREA


def _short(name: str, width: int) -> str:
    return name[:width] + "..." if len(name) > width else name


def _department_of(issue: Issue) -> str:
    return issue.assigned_department.strip() or UNASSIGNED


def _status_counts(issues: Sequence[Issue]) -> Counter:
    return Counter(i.status for i in issues)


def department_performance(issues: Sequence[Issue]) -> list[DepartmentPerformance]:
    """Per-department totals, largest first; unassigned issues grouped together."""
    groups: dict[str, list[Issue]] = {}
    for issue in issues:
        groups.setdefault(_department_of(issue), []).append(issue)
    rows = []
    for name, group in groups.items():
        counts = _status_counts(group)
        resolved = counts[IssueStatus.RESOLVED]
        rows.append(
            DepartmentPerformance(
                department=name,
                short_name=_short(name, 15),
                total=len(group),
                resolved=resolved,
                open=counts[IssueStatus.OPEN],
                in_progress=counts[IssueStatus.IN_PROGRESS],
                resolve_rate=resolution_rate(resolved, len(group)),
                avg_response_time=average_response_time(group),
            )
        )
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows


def _daily_trends(issues: Sequence[Issue], days: int, now: datetime) -> list[DailyTrend]:
    today = now.astimezone(UTC).date()
    buckets: dict = {today - timedelta(days=offset): Counter() for offset in range(days - 1, -1, -1)}
    for issue in issues:
        if issue.reported_at is None:
            continue
        bucket = buckets.get(issue.reported_at.astimezone(UTC).date())
        if bucket is None:
            continue
        bucket["reported"] += 1
        if issue.status == IssueStatus.RESOLVED:
            bucket["resolved"] += 1
        elif issue.status == IssueStatus.IN_PROGRESS:
            bucket["in_progress"] += 1
        else:
            bucket["open"] += 1
    trends = []
    cumulative = 0
    for day, counts in buckets.items():
        cumulative += counts["reported"]
        trends.append(
            DailyTrend(
                date=day,
                reported=counts["reported"],
                resolved=counts["resolved"],
                in_progress=counts["in_progress"],
                open=counts["open"],
                cumulative=cumulative,
            )
        )
    return trends


def _top_areas(issues: Sequence[Issue]) -> list[AreaStats]:
    groups: dict[str, list[int]] = {}
    for issue in issues:
        entry = groups.setdefault(extract_area(issue.address), [0, 0])
        entry[0] += 1
        if issue.status == IssueStatus.RESOLVED:
            entry[1] += 1
    rows = [
        AreaStats(
            area=area,
            total=total,
            resolved=resolved,
            open=total - resolved,
            resolve_rate=resolution_rate(resolved, total),
        )
        for area, (total, resolved) in groups.items()
    ]
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows[:TOP_N]


def _top_reporters(issues: Sequence[Issue]) -> list[TopReporter]:
    counts = Counter(i.reported_by for i in issues if i.reported_by)
    return [
        TopReporter(name=email.split("@")[0] or email, email=email, count=count)
        for email, count in counts.most_common(TOP_N)
    ]


def _distribution(values: Iterable[str], order: Sequence[str]) -> list[CountItem]:
    counts = Counter(values)
    return [CountItem(name=name, count=counts[name]) for name in order if counts[name] > 0]


def compute_analytics(
    issues: Sequence[Issue],
    days: int,
    now: datetime,
    department: str | None = None,
) -> AnalyticsReport:
    """Figures for issues reported in the last ``days`` days.

    Args:
        issues: Every issue in the store.
        days: Trailing window length; also the number of daily buckets.
        now: Reference time (UTC-aware).
        department: Restrict to issues assigned to this department name.
    """
    cutoff = now - timedelta(days=days)
    filtered = [
        i
        for i in issues
        if i.reported_at is not None
        and i.reported_at >= cutoff
        and (not department or i.assigned_department == department)
    ]
    resolved = sum(1 for i in filtered if i.status == IssueStatus.RESOLVED)
    categories = Counter(i.category or "Unknown" for i in filtered)
    return AnalyticsReport(
        days=days,
        department=department,
        total_issues=len(filtered),
        resolved_issues=resolved,
        resolution_rate=resolution_rate(resolved, len(filtered)),
        avg_response_time=average_response_time(filtered),
        active_reporters=len({i.reported_by_id or i.reported_by for i in filtered}),
        daily_trends=_daily_trends(filtered, days, now),
        department_performance=department_performance(filtered),
        priority_distribution=_distribution(
            (i.priority.value for i in filtered), IssuePriority.values()
        ),
        status_distribution=_distribution(
            (i.status.value for i in filtered), IssueStatus.values()
        ),
        top_categories=[
            CountItem(name=name, count=count) for name, count in categories.most_common(TOP_N)
        ],
        top_reporters=_top_reporters(filtered),
        top_areas=_top_areas(filtered),
    )


def _month_start(moment: datetime, months_back: int = 0) -> datetime:
    year, month = moment.year, moment.month - months_back
    while month < 1:
        month += 12
        year -= 1
    return datetime(year, month, 1, tzinfo=UTC)


def _resolution_hours(issue: Issue) -> float | None:
    if issue.reported_at is None or issue.last_updated is None:
        return None
    return (issue.last_updated - issue.reported_at).total_seconds() / 3600


def compute_dashboard(issues: Sequence[Issue], now: datetime) -> DashboardSummary:
    """Headline figures for the dashboard landing page."""
    counts = _status_counts(issues)

    this_month = _month_start(now)
    last_month = _month_start(now, 1)
    current = [i for i in issues if i.reported_at is not None and i.reported_at >= this_month]
    previous = [
        i
        for i in issues
        if i.reported_at is not None and last_month <= i.reported_at < this_month
    ]

    def _resolved(items: list[Issue]) -> int:
        return sum(1 for i in items if i.status == IssueStatus.RESOLVED)

    changes = PercentageChanges(
        issues=percentage_change(len(current), len(previous)),
        resolved=percentage_change(_resolved(current), _resolved(previous)),
        pending=percentage_change(
            len(current) - _resolved(current), len(previous) - _resolved(previous)
        ),
    )

    trend = [
        DashboardTrend(date=t.date, reported=t.reported, resolved=t.resolved)
        for t in _daily_trends(issues, 14, now)
    ]

    departments = []
    for row in department_performance(issues)[:6]:
        departments.append(
            DashboardDepartment(
                name=_short(row.department, 12),
                total=row.total,
                resolved=row.resolved,
                open=row.total - row.resolved,
            )
        )

    resolved_hours = [
        h
        for h in (_resolution_hours(i) for i in issues if i.status == IssueStatus.RESOLVED)
        if h is not None
    ]
    within_sla = sum(1 for h in resolved_hours if h <= SLA_COMPLIANCE_HOURS)

    recent = sorted(
        issues,
        key=lambda i: i.reported_at or datetime.min.replace(tzinfo=UTC),
        reverse=True,
    )[:10]

    return DashboardSummary(
        total=len(issues),
        open=counts[IssueStatus.OPEN],
        in_progress=counts[IssueStatus.IN_PROGRESS],
        resolved=counts[IssueStatus.RESOLVED],
        changes=changes,
        sla_compliance=resolution_rate(within_sla, len(resolved_hours)),
        avg_resolution_hours=(
            int(round_half_up(sum(resolved_hours) / len(resolved_hours)))
            if resolved_hours
            else 0
        ),
        status_distribution=_distribution(
            (i.status.value for i in issues), IssueStatus.values()
        ),
        trend=trend,
        top_departments=departments,
        categories=[
            CountItem(name=name, count=count)
            for name, count in Counter(i.category or "Unknown" for i in issues).items()
        ],
        recent_issues=recent,
    )


def department_stats(department: str, issues: Iterable[Issue]) -> DepartmentStats:
    """Counters for issues currently assigned to ``department``."""
    own = [i for i in issues if i.assigned_department == department]
    counts = _status_counts(own)
    resolved = counts[IssueStatus.RESOLVED]
    return DepartmentStats(
        department=department,
        total=len(own),
        open=counts[IssueStatus.OPEN],
        in_progress=counts[IssueStatus.IN_PROGRESS],
        resolved=resolved,
        resolve_rate=resolution_rate(resolved, len(own)),
        avg_response_time=average_response_time(own) if own else None,
    )


def communication_analytics(
    logs: Sequence[NotificationLog], now: datetime
) -> CommunicationAnalytics:
    """Delivery totals over the notification log."""
    week_ago = now - timedelta(days=7)
    total_recipients = sum(log.recipient_count for log in logs)
    total_success = sum(log.success_count for log in logs)
    return CommunicationAnalytics(
        total_sent=len(logs),
        sent_this_week=sum(1 for log in logs if log.sent_at is not None and log.sent_at >= week_ago),
        success_rate=resolution_rate(total_success, total_recipients),
        total_recipients=total_recipients,
        by_type=dict(Counter(log.type.value for log in logs)),
    )


def sla_status(issue: Issue, now: datetime) -> SlaStatus:
    """Where an issue stands against its priority's resolution deadline."""
    deadline = SLA_HOURS.get(issue.priority, SLA_HOURS[IssuePriority.MEDIUM])
    reported = issue.reported_at or now
    elapsed = max((now - reported).total_seconds() / 3600, 0.0)
    remaining = deadline - elapsed
    done = issue.status == IssueStatus.RESOLVED
    breached = not done and remaining <= 0
    return SlaStatus(
        issue_id=issue.id,
        priority=issue.priority.value,
        deadline_hours=deadline,
        elapsed_hours=round(elapsed, 2),
        remaining_hours=round(remaining, 2),
        done=done,
        breached=breached,
        at_risk=not done and not breached and remaining < deadline * SLA_AT_RISK_FRACTION,
    )
