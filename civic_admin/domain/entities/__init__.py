"""Domain entities.

Pure domain models; no persistence concerns.
"""

from civic_admin.domain.entities.department import AutoAssignmentRule, Department
from civic_admin.domain.entities.issue import Comment, Issue, IssueLocation
from civic_admin.domain.entities.notification import (
    AutomationRule,
    NotificationLog,
    NotificationTemplate,
)
from civic_admin.domain.entities.user import AppUser

__all__ = [
    "AppUser",
    "AutoAssignmentRule",
    "AutomationRule",
    "Comment",
    "Department",
    "Issue",
    "IssueLocation",
    "NotificationLog",
    "NotificationTemplate",
]
