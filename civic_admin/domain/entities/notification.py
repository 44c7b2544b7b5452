"""Notification log, template and automation rule entities."""

from dataclasses import dataclass
from datetime import datetime

from civic_admin.domain.enums import (
    AutomationTrigger,
    NotificationPriority,
    NotificationStatus,
    NotificationTarget,
    NotificationType,
    TemplateType,
)


@dataclass
class NotificationLog:
    """Audit record of one send, with real delivery counters."""

    id: str
    title: str
    body: str
    type: NotificationType = NotificationType.MANUAL
    target: NotificationTarget = NotificationTarget.ALL
    priority: NotificationPriority = NotificationPriority.NORMAL
    status: NotificationStatus = NotificationStatus.SENT
    sent_by: str = ""
    sent_at: datetime | None = None
    recipient_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    related_issue_id: str | None = None


@dataclass
class NotificationTemplate:
    id: str
    name: str
    title: str
    body: str
    type: TemplateType = TemplateType.INFO
    created_at: datetime | None = None


@dataclass
class AutomationRule:
    """Sends a templated notification when an issue event matches.

    ``condition`` is a comma-separated list of ``field=value`` clauses;
    an empty condition matches every issue.
    """

    id: str
    trigger: AutomationTrigger
    condition: str = ""
    template_id: str | None = None
    description: str = ""
    enabled: bool = True
    times_triggered: int = 0
    last_triggered: datetime | None = None
    created_at: datetime | None = None
