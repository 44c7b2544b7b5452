"""Issue and comment domain entities.

Issues are created by the citizen reporting client and mutated by staff
actions. Comments form the per-issue activity history.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from civic_admin.domain.enums import CommentType, IssuePriority, IssueStatus


@dataclass(frozen=True)
class IssueLocation:
    """WGS84 coordinates of a reported issue."""

    latitude: float
    longitude: float


@dataclass
class Issue:
    """Civic issue as read from the document store.

    Fields the reporting client may leave empty default to neutral values so
    analytics and matching never need to guard against missing keys.
    """

    id: str
    title: str = ""
    description: str = ""
    status: IssueStatus = IssueStatus.OPEN
    priority: IssuePriority = IssuePriority.MEDIUM
    category: str = ""
    address: str = ""
    location: IssueLocation | None = None
    reported_by: str = ""
    reported_by_id: str | None = None
    assigned_department: str = ""
    admin_notes: str = ""
    image_url: str | None = None
    reported_at: datetime | None = None
    last_updated: datetime | None = None
    duplicate_of_id: str | None = None
    duplicate_score: float | None = None
    ai_analysis: dict[str, Any] | None = None

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_department.strip())

    @property
    def has_location(self) -> bool:
        return self.location is not None

    def template_context(self) -> dict[str, Any]:
        """Plain dict exposed to notification templates as ``issue``."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "category": self.category,
            "address": self.address,
            "reported_by": self.reported_by,
            "assigned_department": self.assigned_department or "Unassigned",
        }


@dataclass
class Comment:
    """Entry in an issue's comment history."""

    id: str
    text: str
    author: str
    author_email: str = ""
    type: CommentType = CommentType.COMMENT
    created_at: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)
