"""Department API: CRUD, per-department stats and default seeding."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from civic_admin.api.v1.dependencies import AdminUser, StaffUser, get_department_service
from civic_admin.application.dtos.department import DepartmentCreate, DepartmentUpdate
from civic_admin.application.use_cases.departments import DepartmentService
from civic_admin.core.limiter import limit_writes
from civic_admin.schemas.common import SeedResponse
from civic_admin.schemas.department import (
    DepartmentCreateRequest,
    DepartmentResponse,
    DepartmentStatsResponse,
    DepartmentUpdateRequest,
)

router = APIRouter()

DepartmentServiceDep = Annotated[DepartmentService, Depends(get_department_service)]


@router.get("", response_model=list[DepartmentResponse])
async def list_departments(_: StaffUser, service: DepartmentServiceDep):
    """Departments ordered by name (the order keyword matching uses)."""
    return [DepartmentResponse.model_validate(d) for d in await service.list_departments()]


@router.post("", response_model=DepartmentResponse, status_code=201)
@limit_writes
async def create_department(
    request: Request,
    body: DepartmentCreateRequest,
    _: StaffUser,
    service: DepartmentServiceDep,
):
    """Create a department; 409 when the name is taken."""
    data = body.model_dump()
    if isinstance(data["keywords"], str):
        data["keywords"] = data["keywords"].split(",")
    return DepartmentResponse.model_validate(
        await service.create_department(DepartmentCreate(**data))
    )


@router.post("/seed", response_model=SeedResponse)
@limit_writes
async def seed_departments(request: Request, _: AdminUser, service: DepartmentServiceDep):
    """Create the default departments that do not exist yet."""
    return SeedResponse.model_validate(await service.seed_default_departments())


@router.get("/stats", response_model=list[DepartmentStatsResponse])
async def all_department_stats(_: StaffUser, service: DepartmentServiceDep):
    return [DepartmentStatsResponse.model_validate(s) for s in await service.all_stats()]


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(department_id: str, _: StaffUser, service: DepartmentServiceDep):
    return DepartmentResponse.model_validate(await service.get_department(department_id))


@router.patch("/{department_id}", response_model=DepartmentResponse)
@limit_writes
async def update_department(
    request: Request,
    department_id: str,
    body: DepartmentUpdateRequest,
    _: StaffUser,
    service: DepartmentServiceDep,
):
    data = body.model_dump(exclude_unset=True)
    if isinstance(data.get("keywords"), str):
        data["keywords"] = data["keywords"].split(",")
    return DepartmentResponse.model_validate(
        await service.update_department(department_id, DepartmentUpdate(**data))
    )


@router.delete("/{department_id}", status_code=204)
@limit_writes
async def delete_department(
    request: Request, department_id: str, _: AdminUser, service: DepartmentServiceDep
) -> Response:
    await service.delete_department(department_id)
    return Response(status_code=204)


@router.get("/{department_id}/stats", response_model=DepartmentStatsResponse)
async def department_stats(department_id: str, _: StaffUser, service: DepartmentServiceDep):
    """Issue counters for the department's currently assigned issues."""
    return DepartmentStatsResponse.model_validate(await service.stats(department_id))
