"""Duplicate issue detection by proximity, category and title overlap."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from civic_admin.application.dtos.issue import DuplicateMatch
from civic_admin.domain.enums import IssueStatus

if TYPE_CHECKING:
    from civic_admin.domain.entities.issue import Issue

EARTH_RADIUS_M = 6_371_000
RADIUS_METERS = 100
WINDOW_DAYS = 7
SCORE_THRESHOLD = 0.6

CATEGORY_WEIGHT = 0.4
DISTANCE_WEIGHT = 0.3
TITLE_WEIGHT = 0.3

CANDIDATE_STATUSES = (IssueStatus.OPEN, IssueStatus.IN_PROGRESS)

_WORD_RE = re.compile(r"\s+")


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _title_words(title: str) -> set[str]:
    return {w for w in _WORD_RE.split(title.lower()) if len(w) > 2}


def title_similarity(a: str, b: str) -> float:
    """Jaccard overlap of title words longer than two characters."""
    words_a = _title_words(a)
    words_b = _title_words(b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def score_duplicate(issue: Issue, other: Issue, distance: float) -> float:
    """Weighted similarity in [0, 1]; distance is in metres."""
    score = 0.0
    if issue.category and issue.category.lower() == other.category.lower():
        score += CATEGORY_WEIGHT
    if distance <= RADIUS_METERS:
        score += DISTANCE_WEIGHT * (1 - distance / RADIUS_METERS)
    score += TITLE_WEIGHT * title_similarity(issue.title, other.title)
    return score


def find_duplicates(
    issue: Issue, candidates: Iterable[Issue], now: datetime
) -> list[DuplicateMatch]:
    """Likely duplicates of ``issue`` among recent open issues, best first.

    Candidates need coordinates, a reported time inside the last
    WINDOW_DAYS and an open or in-progress status. Distance only adds to
    the score; far-away issues can still match on category and title.
    """
    if issue.location is None:
        return []
    cutoff = now - timedelta(days=WINDOW_DAYS)
    matches: list[DuplicateMatch] = []
    for other in candidates:
        if other.id == issue.id or other.location is None:
            continue
        if other.status not in CANDIDATE_STATUSES:
            continue
        if other.reported_at is None or other.reported_at < cutoff:
            continue
        distance = haversine_distance(
            issue.location.latitude,
            issue.location.longitude,
            other.location.latitude,
            other.location.longitude,
        )
        score = score_duplicate(issue, other, distance)
        if score >= SCORE_THRESHOLD:
            matches.append(
                DuplicateMatch(
                    issue_id=other.id,
                    title=other.title,
                    score=round(score, 2),
                    distance_meters=round(distance),
                )
            )
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches
