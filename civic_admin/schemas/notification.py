"""Notification, template and automation rule API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from civic_admin.domain.enums import (
    AutomationTrigger,
    NotificationPriority,
    NotificationStatus,
    NotificationTarget,
    NotificationType,
    TemplateType,
    UserRole,
)


class SendNotificationRequest(BaseModel):
    """``role`` applies to target=role, ``department`` to target=department,
    ``user_ids`` to target=individual."""

    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=2000)
    target: NotificationTarget = NotificationTarget.ALL
    priority: NotificationPriority = NotificationPriority.NORMAL
    role: UserRole | None = None
    department: str | None = None
    user_ids: list[str] = Field(default_factory=list, max_length=1000)
    related_issue_id: str | None = None


class SendResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    log_id: str | None = None
    recipient_count: int
    success_count: int
    failure_count: int
    status: NotificationStatus


class NotificationLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    body: str
    type: NotificationType
    target: NotificationTarget
    priority: NotificationPriority
    status: NotificationStatus
    sent_by: str
    sent_at: datetime | None = None
    recipient_count: int
    success_count: int
    failure_count: int
    related_issue_id: str | None = None


class CommunicationAnalyticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_sent: int
    sent_this_week: int
    success_rate: int
    total_recipients: int
    by_type: dict[str, int]


class TemplateCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=2000)
    type: TemplateType = TemplateType.INFO


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    title: str
    body: str
    type: TemplateType
    created_at: datetime | None = None


class AutomationRuleCreateRequest(BaseModel):
    """``condition`` is comma-separated ``field=value`` clauses; empty matches all."""

    trigger: AutomationTrigger
    condition: str = Field(default="", max_length=500)
    template_id: str | None = None
    description: str = Field(default="", max_length=500)
    enabled: bool = True


class AutomationRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    trigger: AutomationTrigger
    condition: str
    template_id: str | None = None
    description: str
    enabled: bool
    times_triggered: int
    last_triggered: datetime | None = None
    created_at: datetime | None = None
