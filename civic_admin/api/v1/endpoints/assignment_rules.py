"""Auto-assignment rule API: category routing rules and the bulk run."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from civic_admin.api.v1.dependencies import (
    AdminUser,
    StaffUser,
    get_auto_assign_service,
    get_department_service,
)
from civic_admin.application.dtos.department import AssignmentRuleCreate
from civic_admin.application.use_cases.auto_assign import AutoAssignService
from civic_admin.application.use_cases.departments import DepartmentService
from civic_admin.core.limiter import limit_bulk, limit_writes
from civic_admin.schemas.common import SeedResponse, ToggleRequest
from civic_admin.schemas.department import AssignmentRuleCreateRequest, AssignmentRuleResponse
from civic_admin.schemas.issue import BulkAssignResponse

router = APIRouter()

DepartmentServiceDep = Annotated[DepartmentService, Depends(get_department_service)]


@router.get("", response_model=list[AssignmentRuleResponse])
async def list_rules(_: StaffUser, service: DepartmentServiceDep):
    return [AssignmentRuleResponse.model_validate(r) for r in await service.list_rules()]


@router.post("", response_model=AssignmentRuleResponse, status_code=201)
@limit_writes
async def create_rule(
    request: Request,
    body: AssignmentRuleCreateRequest,
    _: StaffUser,
    service: DepartmentServiceDep,
):
    rule = await service.create_rule(AssignmentRuleCreate(**body.model_dump()))
    return AssignmentRuleResponse.model_validate(rule)


@router.post("/seed", response_model=SeedResponse)
@limit_writes
async def seed_rules(request: Request, _: AdminUser, service: DepartmentServiceDep):
    """Create default rules for categories that have none."""
    return SeedResponse.model_validate(await service.seed_default_rules())


@router.post("/run", response_model=BulkAssignResponse)
@limit_bulk
async def run_bulk_auto_assign(
    request: Request,
    _: StaffUser,
    auto_assign: Annotated[AutoAssignService, Depends(get_auto_assign_service)],
):
    """Route every unassigned issue once."""
    return BulkAssignResponse.model_validate(await auto_assign.run_bulk_auto_assign())


@router.patch("/{rule_id}", response_model=AssignmentRuleResponse)
@limit_writes
async def toggle_rule(
    request: Request,
    rule_id: str,
    body: ToggleRequest,
    _: StaffUser,
    service: DepartmentServiceDep,
):
    return AssignmentRuleResponse.model_validate(await service.toggle_rule(rule_id, body.enabled))


@router.delete("/{rule_id}", status_code=204)
@limit_writes
async def delete_rule(
    request: Request, rule_id: str, _: AdminUser, service: DepartmentServiceDep
) -> Response:
    await service.delete_rule(rule_id)
    return Response(status_code=204)
