"""Tests for dashboard, analytics, SLA and communication figures."""

from datetime import UTC, date, datetime, timedelta

import pytest

from civic_admin.application.services.analytics import (
    UNKNOWN_AREA,
    communication_analytics,
    compute_analytics,
    compute_dashboard,
    department_stats,
    extract_area,
    percentage_change,
    resolution_rate,
    response_time_days,
    sla_status,
)
from civic_admin.application.use_cases.analytics import AnalyticsService
from civic_admin.domain.entities import Issue, NotificationLog
from civic_admin.domain.enums import IssuePriority, IssueStatus, NotificationType
from civic_admin.domain.exceptions import ValidationException
from tests.fakes import InMemoryIssueRepository

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


def _at(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


def _issues() -> list[Issue]:
    return [
        Issue(
            id="a",
            title="Pothole",
            status=IssueStatus.RESOLVED,
            priority=IssuePriority.HIGH,
            category="Roads",
            address="12 Main Rd, Sector 5, City",
            reported_by="alice@example.com",
            reported_by_id="u1",
            assigned_department="Public Works",
            reported_at=_at(2025, 3, 9, 10),
            last_updated=_at(2025, 3, 10, 10),
        ),
        Issue(
            id="b",
            title="Cracked pavement",
            status=IssueStatus.IN_PROGRESS,
            priority=IssuePriority.MEDIUM,
            category="Roads",
            address="Block C, Downtown",
            reported_by="alice@example.com",
            reported_by_id="u1",
            assigned_department="Public Works",
            reported_at=_at(2025, 3, 8, 9),
            last_updated=_at(2025, 3, 8, 21),
        ),
        Issue(
            id="c",
            title="Overflowing bin",
            status=IssueStatus.OPEN,
            priority=IssuePriority.LOW,
            category="Garbage",
            reported_by="bob@example.com",
            reported_by_id="u2",
            reported_at=_at(2025, 3, 10, 8),
        ),
        Issue(
            id="d",
            title="Dark street",
            status=IssueStatus.RESOLVED,
            category="Streetlight",
            assigned_department="Electrical",
            reported_at=_at(2025, 1, 1, 0),
            last_updated=_at(2025, 1, 5, 0),
        ),
        Issue(
            id="e",
            title="Smoke from factory",
            category="Pollution",
            reported_at=_at(2025, 2, 15, 0),
        ),
    ]


class TestRates:
    def test_resolution_rate_rounds_half_up(self) -> None:
        assert resolution_rate(1, 3) == 33
        assert resolution_rate(2, 3) == 67
        assert resolution_rate(1, 8) == 13
        assert resolution_rate(0, 0) == 0

    def test_percentage_change(self) -> None:
        assert percentage_change(0, 0) == 0
        assert percentage_change(5, 0) == 100
        assert percentage_change(3, 4) == -25
        assert percentage_change(1, 3) == -67

    def test_response_time_none_while_open(self) -> None:
        assert response_time_days(_issues()[2]) is None

    def test_response_time_rounds_up_days(self) -> None:
        assert response_time_days(_issues()[1]) == 1


class TestExtractArea:
    @pytest.mark.parametrize(
        ("address", "area"),
        [
            ("12 Main Rd, Sector 5, City", "Sector 5"),
            ("House 4, block b, Old Town", "block b"),
            ("Colony Green Park, Delhi", "Colony Green Park"),
            ("45 Baker Street, Marylebone, London", "Marylebone"),
            ("Springfield", "Springfield"),
            ("", UNKNOWN_AREA),
            (None, UNKNOWN_AREA),
        ],
    )
    def test_area(self, address: str | None, area: str) -> None:
        assert extract_area(address) == area


class TestComputeAnalytics:
    def test_window_totals(self) -> None:
        report = compute_analytics(_issues(), 7, NOW)
        assert report.total_issues == 3
        assert report.resolved_issues == 1
        assert report.resolution_rate == 33
        assert report.avg_response_time == 1.0
        assert report.active_reporters == 2

    def test_daily_trends_cover_every_day(self) -> None:
        trends = compute_analytics(_issues(), 7, NOW).daily_trends
        assert len(trends) == 7
        assert trends[0].date == date(2025, 3, 4)
        assert trends[-1].date == date(2025, 3, 10)
        by_day = {t.date: t for t in trends}
        assert by_day[date(2025, 3, 8)].in_progress == 1
        assert by_day[date(2025, 3, 9)].resolved == 1
        assert by_day[date(2025, 3, 10)].open == 1
        assert trends[-1].cumulative == 3

    def test_breakdowns(self) -> None:
        report = compute_analytics(_issues(), 7, NOW)
        top = report.department_performance[0]
        assert (top.department, top.total, top.resolve_rate) == ("Public Works", 2, 50)
        assert report.department_performance[1].department == "Unassigned"
        assert [p.name for p in report.priority_distribution] == ["High", "Medium", "Low"]
        assert [(c.name, c.count) for c in report.top_categories] == [("Roads", 2), ("Garbage", 1)]
        assert report.top_reporters[0].name == "alice"
        assert report.top_reporters[0].count == 2
        assert {a.area for a in report.top_areas} == {"Sector 5", "Block C", UNKNOWN_AREA}

    def test_department_filter(self) -> None:
        report = compute_analytics(_issues(), 7, NOW, department="Public Works")
        assert report.total_issues == 2
        assert report.active_reporters == 1


class TestComputeDashboard:
    def test_headline_counts(self) -> None:
        summary = compute_dashboard(_issues(), NOW)
        assert (summary.total, summary.open, summary.in_progress, summary.resolved) == (5, 2, 1, 2)

    def test_month_over_month_changes(self) -> None:
        changes = compute_dashboard(_issues(), NOW).changes
        assert changes.issues == 200
        assert changes.resolved == 100
        assert changes.pending == 100

    def test_sla_compliance_and_resolution_hours(self) -> None:
        summary = compute_dashboard(_issues(), NOW)
        assert summary.sla_compliance == 50
        assert summary.avg_resolution_hours == 60

    def test_trend_and_recent(self) -> None:
        summary = compute_dashboard(_issues(), NOW)
        assert len(summary.trend) == 14
        assert summary.recent_issues[0].id == "c"

    def test_empty(self) -> None:
        summary = compute_dashboard([], NOW)
        assert summary.total == 0
        assert summary.sla_compliance == 0
        assert summary.avg_resolution_hours == 0


class TestSlaStatus:
    def test_at_risk_in_last_quarter(self) -> None:
        issue = Issue(id="x", priority=IssuePriority.CRITICAL, reported_at=NOW - timedelta(hours=3.5))
        status = sla_status(issue, NOW)
        assert status.deadline_hours == 4
        assert status.at_risk
        assert not status.breached

    def test_breached(self) -> None:
        issue = Issue(id="x", priority=IssuePriority.CRITICAL, reported_at=NOW - timedelta(hours=5))
        status = sla_status(issue, NOW)
        assert status.breached
        assert status.remaining_hours == -1.0

    def test_resolved_is_never_breached(self) -> None:
        issue = Issue(
            id="x",
            priority=IssuePriority.LOW,
            status=IssueStatus.RESOLVED,
            reported_at=NOW - timedelta(days=30),
        )
        status = sla_status(issue, NOW)
        assert status.done
        assert not status.breached
        assert not status.at_risk


def test_department_stats_counts_only_that_department() -> None:
    stats = department_stats("Public Works", _issues())
    assert (stats.total, stats.open, stats.in_progress, stats.resolved) == (2, 0, 1, 1)
    assert stats.resolve_rate == 50
    assert department_stats("Nobody", _issues()).avg_response_time is None


def test_communication_analytics() -> None:
    logs = [
        NotificationLog(
            id="1", title="t", body="b", sent_at=NOW - timedelta(days=1),
            recipient_count=4, success_count=3, type=NotificationType.MANUAL,
        ),
        NotificationLog(
            id="2", title="t", body="b", sent_at=NOW - timedelta(days=10),
            recipient_count=4, success_count=4, type=NotificationType.AUTOMATED,
        ),
    ]
    result = communication_analytics(logs, NOW)
    assert result.total_sent == 2
    assert result.sent_this_week == 1
    assert result.total_recipients == 8
    assert result.success_rate == 88
    assert result.by_type == {"manual": 1, "automated": 1}


class TestAnalyticsService:
    async def test_days_out_of_range(self) -> None:
        service = AnalyticsService(InMemoryIssueRepository(_issues()))
        for days in (0, 366):
            with pytest.raises(ValidationException) as exc_info:
                await service.report(days, NOW)
            assert exc_info.value.details == {"field": "days"}

    async def test_report_uses_repository(self) -> None:
        service = AnalyticsService(InMemoryIssueRepository(_issues()))
        report = await service.report(30, NOW, department="")
        assert report.department is None
        assert report.total_issues == 4
