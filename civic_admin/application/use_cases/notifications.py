"""Notification use cases: push + in-app delivery, audiences, templates and log."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from civic_admin.application.dtos.notification import (
    CommunicationAnalytics,
    NotificationLogCreate,
    NotificationPayload,
    PushResult,
    SendResult,
    TemplateCreate,
)
from civic_admin.application.services.analytics import communication_analytics
from civic_admin.domain.enums import NotificationStatus, NotificationTarget, UserRole
from civic_admin.domain.exceptions import (
    CivicAdminException,
    ResourceNotFoundException,
    ValidationException,
)
from civic_admin.shared.logging import get_logger

if TYPE_CHECKING:
    from civic_admin.application.interfaces.repositories import (
        INotificationLogRepository,
        ITemplateRepository,
        IUserRepository,
    )
    from civic_admin.application.interfaces.services import IPushSender
    from civic_admin.domain.entities import AppUser, NotificationLog, NotificationTemplate

logger = get_logger(__name__)

DEFAULT_LOG_LIMIT = 50


def delivery_status(success: int, failure: int) -> NotificationStatus:
    """sent when everything arrived, partial on a mix, failed when nothing did."""
    if success > 0 and failure > 0:
        return NotificationStatus.PARTIAL
    if success > 0:
        return NotificationStatus.SENT
    return NotificationStatus.FAILED


class NotificationService:
    """Sends notifications and records every send in the notification log."""

    def __init__(
        self,
        user_repo: IUserRepository,
        log_repo: INotificationLogRepository,
        template_repo: ITemplateRepository,
        push_sender: IPushSender,
    ) -> None:
        self.user_repo = user_repo
        self.log_repo = log_repo
        self.template_repo = template_repo
        self.push_sender = push_sender

    async def send_to_users(
        self, payload: NotificationPayload, users: Sequence[AppUser]
    ) -> SendResult:
        """Push to users that accept push, log the send, then write in-app copies.

        The push has already gone out when the log or in-app writes run, so
        store failures there are logged and reflected in the result
        (``log_id`` None) instead of being raised.
        """
        tokens = [u.push_token for u in users if u.can_receive_push and u.push_token]
        push = PushResult(success=0, failure=0)
        if tokens:
            push = await self.push_sender.send(
                tokens,
                payload.title,
                payload.body,
                {"type": payload.type.value, **payload.data},
            )
        status = delivery_status(push.success, push.failure)

        log_id: str | None = None
        try:
            log_id = await self.log_repo.add(
                NotificationLogCreate(
                    title=payload.title,
                    body=payload.body,
                    type=payload.type,
                    target=payload.target,
                    priority=payload.priority,
                    status=status,
                    sent_by=payload.sent_by,
                    recipient_count=len(users),
                    success_count=push.success,
                    failure_count=push.failure,
                    related_issue_id=payload.related_issue_id,
                )
            )
        except CivicAdminException:
            logger.exception("Failed to write notification log entry")

        try:
            await self.user_repo.add_in_app_notifications(
                [u.id for u in users],
                payload.title,
                payload.body,
                payload.type.value,
                payload.related_issue_id,
            )
        except CivicAdminException:
            logger.exception("Failed to create in-app notifications")

        logger.info(
            "Notification %r: recipients=%d success=%d failure=%d",
            payload.title[:60],
            len(users),
            push.success,
            push.failure,
        )
        return SendResult(
            log_id=log_id,
            recipient_count=len(users),
            success_count=push.success,
            failure_count=push.failure,
            status=status,
        )

    async def resolve_audience(
        self,
        target: NotificationTarget,
        role: UserRole | None = None,
        department: str | None = None,
        user_ids: Sequence[str] | None = None,
    ) -> list[AppUser]:
        """Users addressed by a manual send."""
        if target == NotificationTarget.ALL:
            return [u for u in await self.user_repo.list_all() if u.push_token]
        if target == NotificationTarget.ROLE:
            if role is None:
                raise ValidationException("role is required for role notifications", field="role")
            return await self.user_repo.list_by_role(role)
        if target == NotificationTarget.DEPARTMENT:
            heads = await self.user_repo.list_by_role(UserRole.DEPARTMENT_HEAD)
            if department:
                return [u for u in heads if u.department == department]
            return heads
        if not user_ids:
            raise ValidationException(
                "user_ids is required for individual notifications", field="user_ids"
            )
        users = []
        for user_id in dict.fromkeys(user_ids):
            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                raise ResourceNotFoundException("user", user_id)
            users.append(user)
        return users

    async def send_manual(
        self,
        payload: NotificationPayload,
        role: UserRole | None = None,
        department: str | None = None,
        user_ids: Sequence[str] | None = None,
    ) -> SendResult:
        """Staff-initiated send to an audience."""
        if not payload.title.strip() or not payload.body.strip():
            raise ValidationException("Title and body are required", field="title")
        users = await self.resolve_audience(payload.target, role, department, user_ids)
        return await self.send_to_users(payload, users)

    async def list_logs(self, limit: int | None = DEFAULT_LOG_LIMIT) -> list[NotificationLog]:
        return await self.log_repo.list_recent(limit)

    async def analytics(self, now: datetime) -> CommunicationAnalytics:
        return communication_analytics(await self.log_repo.list_recent(None), now)

    async def list_templates(self) -> list[NotificationTemplate]:
        return await self.template_repo.list_all()

    async def create_template(self, data: TemplateCreate) -> NotificationTemplate:
        if not data.name.strip() or not data.title.strip() or not data.body.strip():
            raise ValidationException("Template name, title and body are required", field="name")
        return await self.template_repo.create(data)

    async def delete_template(self, template_id: str) -> None:
        if await self.template_repo.get_by_id(template_id) is None:
            raise ResourceNotFoundException("template", template_id)
        await self.template_repo.delete(template_id)

    async def update_push_token(
        self, user_id: str, token: str | None, notifications_enabled: bool = True
    ) -> None:
        if await self.user_repo.get_by_id(user_id) is None:
            raise ResourceNotFoundException("user", user_id)
        await self.user_repo.set_push_token(user_id, token or None, notifications_enabled)
