"""Automation rule condition strings.

A condition is a comma-separated list of ``field=value`` clauses, e.g.
``priority=High, category=Roads``. Every clause must match the issue,
compared case-insensitively. An empty condition matches every issue.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from civic_admin.domain.exceptions import ValidationException

if TYPE_CHECKING:
    from civic_admin.domain.entities.issue import Issue

_FIELD_ALIASES = {
    "status": "status",
    "priority": "priority",
    "category": "category",
    "department": "assigned_department",
    "assigneddepartment": "assigned_department",
    "assigned_department": "assigned_department",
    "address": "address",
    "reporter": "reported_by",
    "reportedby": "reported_by",
}


def _field_key(raw: str) -> str | None:
    return _FIELD_ALIASES.get(raw.strip().lower().replace("-", "_").replace(" ", ""))


def parse_condition(condition: str) -> list[tuple[str, str]]:
    """Return (issue field, expected value) pairs.

    Raises:
        ValidationException: On a clause without ``=`` or an unknown field.
    """
    clauses: list[tuple[str, str]] = []
    for raw in condition.split(","):
        if not raw.strip():
            continue
        name, sep, value = raw.partition("=")
        if not sep:
            raise ValidationException(
                f"Condition clause must look like field=value: {raw.strip()!r}",
                field="condition",
            )
        key = _field_key(name)
        if key is None:
            raise ValidationException(
                f"Unknown condition field: {name.strip()!r}", field="condition"
            )
        clauses.append((key, value.strip().lower()))
    return clauses


def condition_matches(condition: str, issue: Issue) -> bool:
    """True when every clause matches; malformed conditions never match."""
    try:
        clauses = parse_condition(condition)
    except ValidationException:
        return False
    context = issue.template_context()
    return all(str(context.get(key, "")).lower() == expected for key, expected in clauses)
