"""CSV export of issue lists."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from civic_admin.domain.entities.issue import Issue

CSV_COLUMNS = ["Title", "Category", "Status", "Priority", "Department", "ReportedBy", "ReportedAt"]


def issues_to_csv(issues: Iterable[Issue]) -> str:
    """Render issues as CSV with a header row; dates are ISO (YYYY-MM-DD)."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for issue in issues:
        writer.writerow(
            [
                issue.title,
                issue.category,
                issue.status.value,
                issue.priority.value,
                issue.assigned_department,
                issue.reported_by,
                issue.reported_at.date().isoformat() if issue.reported_at else "",
            ]
        )
    return output.getvalue()
