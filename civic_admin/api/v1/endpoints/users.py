"""User management API. Everything except reads is admin only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from civic_admin.api.v1.dependencies import (
    AdminUser,
    StaffUser,
    get_notification_service,
    get_user_service,
)
from civic_admin.application.dtos.user import UserCreate, UserFilter, UserUpdate
from civic_admin.application.use_cases.notifications import NotificationService
from civic_admin.application.use_cases.users import UserService
from civic_admin.core.limiter import limit_writes
from civic_admin.domain.enums import UserRole, UserSource, UserStatus
from civic_admin.schemas.user import (
    PushTokenRequest,
    UserCreateRequest,
    UserResponse,
    UserSummaryResponse,
    UserUpdateRequest,
)

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.get("", response_model=list[UserResponse])
async def list_users(
    _: StaffUser,
    service: UserServiceDep,
    role: UserRole | None = None,
    status: UserStatus | None = None,
    source: UserSource | None = None,
    view: str | None = Query(default=None, pattern="^(mobile|staff)$"),
    search: str | None = Query(default=None, max_length=200),
):
    """Users with issue counters; ``view`` is mobile or staff."""
    f = UserFilter(role=role, status=status, source=source, view=view, search=search)
    return [UserResponse.model_validate(u) for u in await service.list_users(f)]


@router.get("/summary", response_model=UserSummaryResponse)
async def user_summary(_: StaffUser, service: UserServiceDep):
    return UserSummaryResponse.model_validate(await service.summary())


@router.post("", response_model=UserResponse, status_code=201)
@limit_writes
async def create_user(
    request: Request, body: UserCreateRequest, _: AdminUser, service: UserServiceDep
):
    return UserResponse.model_validate(await service.create_user(UserCreate(**body.model_dump())))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, _: StaffUser, service: UserServiceDep):
    return UserResponse.model_validate(await service.get_user(user_id))


@router.patch("/{user_id}", response_model=UserResponse)
@limit_writes
async def update_user(
    request: Request,
    user_id: str,
    body: UserUpdateRequest,
    _: AdminUser,
    service: UserServiceDep,
):
    changes = UserUpdate(**body.model_dump(exclude_unset=True))
    return UserResponse.model_validate(await service.update_user(user_id, changes))


@router.post("/{user_id}/toggle-status", response_model=UserResponse)
@limit_writes
async def toggle_user_status(
    request: Request, user_id: str, _: AdminUser, service: UserServiceDep
):
    """Block an active user; reactivate a blocked or inactive one."""
    return UserResponse.model_validate(await service.toggle_status(user_id))


@router.put("/{user_id}/push-token", status_code=204)
@limit_writes
async def update_push_token(
    request: Request,
    user_id: str,
    body: PushTokenRequest,
    _: AdminUser,
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
) -> Response:
    await notifications.update_push_token(user_id, body.push_token, body.notifications_enabled)
    return Response(status_code=204)
