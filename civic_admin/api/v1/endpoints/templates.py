"""Notification template API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from civic_admin.api.v1.dependencies import AdminUser, StaffUser, get_notification_service
from civic_admin.application.dtos.notification import TemplateCreate
from civic_admin.application.use_cases.notifications import NotificationService
from civic_admin.core.limiter import limit_writes
from civic_admin.schemas.notification import TemplateCreateRequest, TemplateResponse

router = APIRouter()

NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


@router.get("", response_model=list[TemplateResponse])
async def list_templates(_: StaffUser, service: NotificationServiceDep):
    return [TemplateResponse.model_validate(t) for t in await service.list_templates()]


@router.post("", response_model=TemplateResponse, status_code=201)
@limit_writes
async def create_template(
    request: Request,
    body: TemplateCreateRequest,
    _: StaffUser,
    service: NotificationServiceDep,
):
    """Title and body may use Jinja placeholders such as ``{{ issue.title }}``."""
    template = await service.create_template(TemplateCreate(**body.model_dump()))
    return TemplateResponse.model_validate(template)


@router.delete("/{template_id}", status_code=204)
@limit_writes
async def delete_template(
    request: Request, template_id: str, _: AdminUser, service: NotificationServiceDep
) -> Response:
    await service.delete_template(template_id)
    return Response(status_code=204)
