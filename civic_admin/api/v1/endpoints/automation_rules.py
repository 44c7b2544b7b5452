"""Automation rule API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from civic_admin.api.v1.dependencies import AdminUser, StaffUser, get_automation_engine
from civic_admin.application.dtos.notification import AutomationRuleCreate
from civic_admin.application.use_cases.automation import AutomationEngine
from civic_admin.core.limiter import limit_writes
from civic_admin.schemas.common import ToggleRequest
from civic_admin.schemas.notification import AutomationRuleCreateRequest, AutomationRuleResponse

router = APIRouter()

EngineDep = Annotated[AutomationEngine, Depends(get_automation_engine)]


@router.get("", response_model=list[AutomationRuleResponse])
async def list_rules(_: StaffUser, engine: EngineDep):
    return [AutomationRuleResponse.model_validate(r) for r in await engine.list_rules()]


@router.post("", response_model=AutomationRuleResponse, status_code=201)
@limit_writes
async def create_rule(
    request: Request,
    body: AutomationRuleCreateRequest,
    _: StaffUser,
    engine: EngineDep,
):
    """400 on a malformed condition, 404 when the template does not exist."""
    rule = await engine.create_rule(AutomationRuleCreate(**body.model_dump()))
    return AutomationRuleResponse.model_validate(rule)


@router.patch("/{rule_id}", response_model=AutomationRuleResponse)
@limit_writes
async def toggle_rule(
    request: Request, rule_id: str, body: ToggleRequest, _: StaffUser, engine: EngineDep
):
    return AutomationRuleResponse.model_validate(await engine.toggle_rule(rule_id, body.enabled))


@router.delete("/{rule_id}", status_code=204)
@limit_writes
async def delete_rule(
    request: Request, rule_id: str, _: AdminUser, engine: EngineDep
) -> Response:
    await engine.delete_rule(rule_id)
    return Response(status_code=204)
