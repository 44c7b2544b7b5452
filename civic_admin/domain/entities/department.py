"""Department and auto-assignment rule entities."""

from dataclasses import dataclass, field

from civic_admin.domain.enums import IssuePriority


@dataclass
class Department:
    """Government department that issues are routed to.

    ``keywords`` are stored lowercase; matching compares them as
    case-insensitive substrings of the issue text.
    """

    id: str
    name: str
    description: str = ""
    head: str = ""
    email: str = ""
    phone: str = ""
    working_hours: str = ""
    keywords: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    active: bool = True
    issues_assigned: int = 0
    issues_resolved: int = 0


@dataclass
class AutoAssignmentRule:
    """Category to department routing rule used when no keyword matches."""

    id: str
    category: str
    department: str
    priority: IssuePriority = IssuePriority.MEDIUM
    enabled: bool = True
