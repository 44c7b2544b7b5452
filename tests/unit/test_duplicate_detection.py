"""Tests for duplicate issue scoring and candidate selection."""

from datetime import UTC, datetime, timedelta

import pytest

from civic_admin.application.services.duplicate_detection import (
    find_duplicates,
    haversine_distance,
    score_duplicate,
    title_similarity,
)
from civic_admin.domain.entities import Issue, IssueLocation
from civic_admin.domain.enums import IssueStatus

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


def _issue(issue_id: str, **kwargs) -> Issue:
    defaults = {
        "title": "Large pothole near school",
        "category": "Roads",
        "location": IssueLocation(12.9716, 77.5946),
        "reported_at": NOW - timedelta(days=1),
    }
    defaults.update(kwargs)
    return Issue(id=issue_id, **defaults)


class TestHaversine:
    def test_same_point_is_zero(self) -> None:
        assert haversine_distance(10.0, 20.0, 10.0, 20.0) == 0.0

    def test_one_degree_latitude(self) -> None:
        assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_195, rel=1e-3)


class TestTitleSimilarity:
    def test_short_words_ignored(self) -> None:
        assert title_similarity("a an of", "a an of") == 0.0

    def test_jaccard(self) -> None:
        # {large, pothole, road} vs {pothole, road, crack}: 2 / 4
        assert title_similarity("Large pothole road", "pothole road crack") == 0.5


class TestScoreDuplicate:
    def test_identical_at_same_spot_scores_one(self) -> None:
        a = _issue("a")
        b = _issue("b")
        assert score_duplicate(a, b, 0.0) == pytest.approx(1.0)

    def test_far_away_gets_no_distance_points(self) -> None:
        a = _issue("a")
        b = _issue("b", title="Something else entirely")
        assert score_duplicate(a, b, 5000.0) == pytest.approx(0.4)


class TestFindDuplicates:
    def test_best_match_first_and_self_excluded(self) -> None:
        issue = _issue("new")
        close = _issue("close")
        partial = _issue("partial", title="Large pothole")
        matches = find_duplicates(issue, [issue, partial, close], NOW)
        assert [m.issue_id for m in matches] == ["close", "partial"]
        assert matches[0].score == 1.0
        assert matches[0].distance_meters == 0

    def test_resolved_and_old_candidates_skipped(self) -> None:
        issue = _issue("new")
        resolved = _issue("resolved", status=IssueStatus.RESOLVED)
        old = _issue("old", reported_at=NOW - timedelta(days=8))
        assert find_duplicates(issue, [resolved, old], NOW) == []

    def test_issue_without_location_has_no_duplicates(self) -> None:
        issue = _issue("new", location=None)
        assert find_duplicates(issue, [_issue("other")], NOW) == []

    def test_below_threshold_not_reported(self) -> None:
        issue = _issue("new")
        other = _issue(
            "other", category="Garbage", title="Overflowing bins", location=IssueLocation(13.5, 77.5)
        )
        assert find_duplicates(issue, [other], NOW) == []
