"""Bearer token authentication for staff routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from civic_admin.application.dtos.auth import StaffPrincipal
from civic_admin.domain.enums import STAFF_ROLES, UserRole
from civic_admin.domain.exceptions import AuthenticationException, AuthorizationException
from civic_admin.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_staff(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> StaffPrincipal:
    """Decode the bearer token; only staff roles may use the admin API."""
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        raise AuthenticationException(str(e)) from e
    try:
        role = UserRole(payload["role"])
    except ValueError as e:
        raise AuthenticationException(f"Unknown role in token: {payload['role']}") from e
    if role not in STAFF_ROLES:
        raise AuthorizationException(role.value, "use the admin portal")
    return StaffPrincipal(user_id=payload["sub"], role=role, email=payload.get("email") or "")


async def require_admin(
    staff: Annotated[StaffPrincipal, Depends(get_current_staff)],
) -> StaffPrincipal:
    """Deletes, seeding and user management are admin only."""
    if not staff.is_admin:
        raise AuthorizationException(staff.role.value, "perform this action")
    return staff


StaffUser = Annotated[StaffPrincipal, Depends(get_current_staff)]
AdminUser = Annotated[StaffPrincipal, Depends(require_admin)]
