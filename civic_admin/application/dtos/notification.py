"""DTOs for notifications, push delivery and automation."""

from dataclasses import dataclass, field
from typing import Any

from civic_admin.domain.enums import (
    AutomationTrigger,
    NotificationPriority,
    NotificationStatus,
    NotificationTarget,
    NotificationType,
    TemplateType,
)


@dataclass(frozen=True)
class PushResult:
    """Outcome of one push gateway call."""

    success: int
    failure: int
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NotificationPayload:
    """What to send and how to record it in the notification log."""

    title: str
    body: str
    type: NotificationType = NotificationType.MANUAL
    target: NotificationTarget = NotificationTarget.ALL
    priority: NotificationPriority = NotificationPriority.NORMAL
    sent_by: str = "admin"
    related_issue_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SendResult:
    log_id: str | None
    recipient_count: int
    success_count: int
    failure_count: int
    status: NotificationStatus


@dataclass(frozen=True)
class NotificationLogCreate:
    title: str
    body: str
    type: NotificationType
    target: NotificationTarget
    priority: NotificationPriority
    status: NotificationStatus
    sent_by: str
    recipient_count: int
    success_count: int
    failure_count: int
    related_issue_id: str | None = None


@dataclass(frozen=True)
class TemplateCreate:
    name: str
    title: str
    body: str
    type: TemplateType = TemplateType.INFO


@dataclass(frozen=True)
class AutomationRuleCreate:
    trigger: AutomationTrigger
    condition: str = ""
    template_id: str | None = None
    description: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class CommunicationAnalytics:
    total_sent: int
    sent_this_week: int
    success_rate: int
    total_recipients: int
    by_type: dict[str, int]
