"""Notification API: manual sends, delivery log and communication analytics."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from civic_admin.api.v1.dependencies import StaffUser, get_notification_service
from civic_admin.application.dtos.notification import NotificationPayload
from civic_admin.application.use_cases.notifications import NotificationService
from civic_admin.core.limiter import limit_send
from civic_admin.domain.enums import NotificationTarget, NotificationType
from civic_admin.schemas.notification import (
    CommunicationAnalyticsResponse,
    NotificationLogResponse,
    SendNotificationRequest,
    SendResultResponse,
)
from civic_admin.shared.utils.datetime import utc_now

router = APIRouter()

NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


@router.post("/send", response_model=SendResultResponse)
@limit_send
async def send_notification(
    request: Request,
    body: SendNotificationRequest,
    staff: StaffUser,
    service: NotificationServiceDep,
):
    """Push to the chosen audience and record the send in the log."""
    payload = NotificationPayload(
        title=body.title,
        body=body.body,
        type=(
            NotificationType.MANUAL
            if body.target == NotificationTarget.INDIVIDUAL
            else NotificationType.BULK
        ),
        target=body.target,
        priority=body.priority,
        sent_by=staff.display,
        related_issue_id=body.related_issue_id,
    )
    result = await service.send_manual(
        payload, role=body.role, department=body.department, user_ids=body.user_ids
    )
    return SendResultResponse.model_validate(result)


@router.get("/logs", response_model=list[NotificationLogResponse])
async def list_logs(
    _: StaffUser,
    service: NotificationServiceDep,
    limit: int = Query(default=50, ge=1, le=500),
):
    """Notification log, newest first."""
    return [NotificationLogResponse.model_validate(log) for log in await service.list_logs(limit)]


@router.get("/analytics", response_model=CommunicationAnalyticsResponse)
async def communication_analytics(_: StaffUser, service: NotificationServiceDep):
    return CommunicationAnalyticsResponse.model_validate(await service.analytics(utc_now()))
