"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from civic_admin.domain.enums import AutomationTrigger, CommentType, UserRole, UserStatus

if TYPE_CHECKING:
    from civic_admin.application.dtos.department import (
        AssignmentRuleCreate,
        DepartmentCreate,
        DepartmentUpdate,
    )
    from civic_admin.application.dtos.issue import IssueUpdate
    from civic_admin.application.dtos.notification import (
        AutomationRuleCreate,
        NotificationLogCreate,
        TemplateCreate,
    )
    from civic_admin.application.dtos.user import UserCreate, UserUpdate
    from civic_admin.domain.entities import (
        AppUser,
        AutoAssignmentRule,
        AutomationRule,
        Comment,
        Department,
        Issue,
        NotificationLog,
        NotificationTemplate,
    )


class IIssueRepository(Protocol):
    """Protocol for the issue collection and its comment sub-collections."""

    async def list_all(self) -> list[Issue]:
        """Return every issue, newest first."""

    async def list_unassigned(self) -> list[Issue]:
        """Return issues with no assigned department."""

    async def get_by_id(self, issue_id: str) -> Issue | None:
        """Return issue by ID."""

    async def update(self, issue_id: str, changes: IssueUpdate) -> None:
        """Apply a partial update and bump lastUpdated. Raises if missing."""

    async def set_duplicate(
        self, issue_id: str, duplicate_of_id: str | None, score: float | None
    ) -> None:
        """Set or clear (None, None) the duplicate flag."""

    async def set_ai_analysis(self, issue_id: str, analysis: dict[str, Any]) -> None:
        """Store the image analysis result."""

    async def delete(self, issue_id: str) -> None:
        """Delete the issue document."""

    async def list_comments(self, issue_id: str) -> list[Comment]:
        """Return comments, oldest first."""

    async def add_comment(
        self,
        issue_id: str,
        text: str,
        author: str,
        author_email: str,
        comment_type: CommentType,
    ) -> Comment:
        """Append a comment to the issue's history."""


class IDepartmentRepository(Protocol):
    async def list_all(self) -> list[Department]:
        """Return departments ordered by name."""

    async def get_by_id(self, department_id: str) -> Department | None:
        """Return department by ID."""

    async def get_by_name(self, name: str) -> Department | None:
        """Return department by exact name."""

    async def create(self, data: DepartmentCreate) -> Department:
        """Create department with zeroed counters."""

    async def update(self, department_id: str, changes: DepartmentUpdate) -> Department | None:
        """Apply a partial update; None if not found."""

    async def delete(self, department_id: str) -> None:
        """Delete department."""


class IAssignmentRuleRepository(Protocol):
    async def list_all(self) -> list[AutoAssignmentRule]:
        """Return all auto-assignment rules ordered by category."""

    async def create(self, data: AssignmentRuleCreate) -> AutoAssignmentRule:
        """Create a rule."""

    async def set_enabled(self, rule_id: str, enabled: bool) -> AutoAssignmentRule | None:
        """Enable or disable a rule; None if not found."""

    async def delete(self, rule_id: str) -> None:
        """Delete a rule."""


class IUserRepository(Protocol):
    async def list_all(self) -> list[AppUser]:
        """Return every user."""

    async def list_by_role(self, role: UserRole) -> list[AppUser]:
        """Return users with the given role."""

    async def get_by_id(self, user_id: str) -> AppUser | None:
        """Return user by ID."""

    async def create(self, data: UserCreate) -> AppUser:
        """Create an admin-created user record."""

    async def update(self, user_id: str, changes: UserUpdate) -> AppUser | None:
        """Apply a partial update; None if not found."""

    async def set_status(self, user_id: str, status: UserStatus) -> None:
        """Set account status."""

    async def set_push_token(
        self, user_id: str, token: str | None, notifications_enabled: bool
    ) -> None:
        """Register or clear the device push token."""

    async def add_in_app_notifications(
        self,
        user_ids: list[str],
        title: str,
        body: str,
        notification_type: str,
        related_issue_id: str | None,
    ) -> None:
        """Write one unread notification per user in a single batch."""


class INotificationLogRepository(Protocol):
    async def add(self, data: NotificationLogCreate) -> str:
        """Append a log entry and return its ID."""

    async def list_recent(self, limit: int | None = None) -> list[NotificationLog]:
        """Return log entries newest first."""


class ITemplateRepository(Protocol):
    async def list_all(self) -> list[NotificationTemplate]:
        """Return templates ordered by name."""

    async def get_by_id(self, template_id: str) -> NotificationTemplate | None:
        """Return template by ID."""

    async def create(self, data: TemplateCreate) -> NotificationTemplate:
        """Create a template."""

    async def delete(self, template_id: str) -> None:
        """Delete a template."""


class IAutomationRuleRepository(Protocol):
    async def list_all(self) -> list[AutomationRule]:
        """Return all automation rules."""

    async def list_enabled(self, trigger: AutomationTrigger) -> list[AutomationRule]:
        """Return enabled rules for a trigger."""

    async def create(self, data: AutomationRuleCreate) -> AutomationRule:
        """Create a rule with zeroed counters."""

    async def set_enabled(self, rule_id: str, enabled: bool) -> AutomationRule | None:
        """Enable or disable a rule; None if not found."""

    async def record_trigger(self, rule_id: str, times_triggered: int, at: datetime) -> None:
        """Store the new trigger counter and time."""

    async def delete(self, rule_id: str) -> None:
        """Delete a rule."""
