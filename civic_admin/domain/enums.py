"""Domain enumerations for the civic admin portal.

Values are the exact strings stored in the document database, since the
reporting client writes the same collections.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class IssueStatus(_ValuesMixin, str, Enum):
    """Issue lifecycle status."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class IssuePriority(_ValuesMixin, str, Enum):
    """Issue priority, highest first."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class UserRole(_ValuesMixin, str, Enum):
    """Portal and app user roles."""

    CITIZEN = "citizen"
    MODERATOR = "moderator"
    ADMIN = "admin"
    DEPARTMENT_HEAD = "department_head"


STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.MODERATOR, UserRole.DEPARTMENT_HEAD})


class UserStatus(_ValuesMixin, str, Enum):
    """Account status."""

    ACTIVE = "active"
    BLOCKED = "blocked"
    PENDING = "pending"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class UserSource(_ValuesMixin, str, Enum):
    """Where the account was created."""

    MOBILE_APP = "mobile_app"
    WEB_PORTAL = "web_portal"
    ADMIN_CREATED = "admin_created"


class CommentType(_ValuesMixin, str, Enum):
    """Kind of entry in an issue's comment history."""

    COMMENT = "comment"
    STATUS_CHANGE = "status_change"
    ASSIGNMENT = "assignment"


class NotificationType(_ValuesMixin, str, Enum):
    """How a notification was produced."""

    MANUAL = "manual"
    AUTOMATED = "automated"
    BULK = "bulk"
    ISSUE_UPDATE = "issue_update"


class NotificationTarget(_ValuesMixin, str, Enum):
    """Audience selector for a notification."""

    ALL = "all"
    DEPARTMENT = "department"
    INDIVIDUAL = "individual"
    ROLE = "role"


class NotificationPriority(_ValuesMixin, str, Enum):
    NORMAL = "normal"
    HIGH = "high"


class NotificationStatus(_ValuesMixin, str, Enum):
    """Delivery outcome recorded in the notification log."""

    SENT = "sent"
    FAILED = "failed"
    PARTIAL = "partial"


class TemplateType(_ValuesMixin, str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    URGENT = "urgent"


class AutomationTrigger(_ValuesMixin, str, Enum):
    """Issue events that can fire automation rules."""

    ISSUE_CREATED = "issue_created"
    ISSUE_ASSIGNED = "issue_assigned"
    STATUS_CHANGED = "status_changed"
    PRIORITY_CHANGED = "priority_changed"
    COMMENT_ADDED = "comment_added"


class Severity(_ValuesMixin, str, Enum):
    """Severity reported by image analysis."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
