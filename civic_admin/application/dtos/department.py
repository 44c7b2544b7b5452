"""DTOs for department and assignment rule use cases."""

from dataclasses import dataclass, field

from civic_admin.domain.enums import IssuePriority


@dataclass(frozen=True)
class DepartmentCreate:
    name: str
    description: str = ""
    head: str = ""
    email: str = ""
    phone: str = ""
    working_hours: str = ""
    keywords: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    active: bool = True


@dataclass(frozen=True)
class DepartmentUpdate:
    """Partial department update. None leaves a field unchanged."""

    name: str | None = None
    description: str | None = None
    head: str | None = None
    email: str | None = None
    phone: str | None = None
    working_hours: str | None = None
    keywords: list[str] | None = None
    categories: list[str] | None = None
    active: bool | None = None


@dataclass(frozen=True)
class DepartmentStats:
    """Per-department issue counters."""

    department: str
    total: int
    open: int
    in_progress: int
    resolved: int
    resolve_rate: int
    avg_response_time: float | None


@dataclass(frozen=True)
class AssignmentRuleCreate:
    category: str
    department: str
    priority: IssuePriority = IssuePriority.MEDIUM
    enabled: bool = True


@dataclass(frozen=True)
class SeedResult:
    """Names (or categories) created by a seeding run; existing ones are skipped."""

    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BulkAssignResult:
    assigned: int
    scanned: int
