"""Keyword-based department matching.

Routes an issue to the first department whose keyword list contains a
case-insensitive substring of the issue text. Department order decides
ties, then keyword order. A linear scan is enough for the handful of
departments a municipality configures.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from civic_admin.domain.entities.department import AutoAssignmentRule, Department
    from civic_admin.domain.entities.issue import Issue


def normalize_keywords(raw: str | Iterable[str] | None) -> list[str]:
    """Split, trim and lowercase keywords; drop blanks and repeats (first wins).

    Args:
        raw: Comma-separated string or iterable of keywords.

    Returns:
        Ordered list of unique lowercase keywords.
    """
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        keyword = str(item).strip().lower()
        if keyword and keyword not in seen:
            seen.add(keyword)
            result.append(keyword)
    return result


def issue_match_text(issue: Issue) -> str:
    """Text the matcher searches: title, description and category."""
    return " ".join(part for part in (issue.title, issue.description, issue.category) if part)


def match_department(text: str, departments: Sequence[Department]) -> Department | None:
    """Return the first active department with a keyword found in ``text``.

    Matching is a case-insensitive substring test. Blank keywords never
    match. Returns None when nothing matches; the issue stays unassigned.
    """
    haystack = text.lower()
    if not haystack.strip():
        return None
    for department in departments:
        if not department.active:
            continue
        for keyword in department.keywords:
            needle = keyword.strip().lower()
            if needle and needle in haystack:
                return department
    return None


def match_category_rule(
    category: str, rules: Sequence[AutoAssignmentRule]
) -> AutoAssignmentRule | None:
    """First enabled rule for the issue category (case-insensitive)."""
    wanted = category.strip().lower()
    if not wanted:
        return None
    for rule in rules:
        if rule.enabled and rule.category.strip().lower() == wanted:
            return rule
    return None
