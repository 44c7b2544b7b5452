"""DTOs for issue use cases."""

from dataclasses import dataclass, field

from civic_admin.domain.enums import IssuePriority, IssueStatus


@dataclass(frozen=True)
class IssueFilter:
    """List filters; all set filters must match."""

    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    category: str | None = None
    department: str | None = None
    unassigned: bool = False
    search: str | None = None


@dataclass(frozen=True)
class IssueUpdate:
    """Partial staff update. None leaves a field unchanged.

    An empty ``assigned_department`` string unassigns the issue.
    """

    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    assigned_department: str | None = None
    admin_notes: str | None = None

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (self.status, self.priority, self.assigned_department, self.admin_notes)
        )


@dataclass(frozen=True)
class BulkUpdateResult:
    updated: list[str] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DuplicateMatch:
    """Nearby recent issue that likely reports the same problem."""

    issue_id: str
    title: str
    score: float
    distance_meters: int
