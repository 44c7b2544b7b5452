"""User management API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from civic_admin.domain.enums import UserRole, UserSource, UserStatus


class UserCreateRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    display_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.CITIZEN
    phone: str = ""
    department: str = ""


class UserUpdateRequest(BaseModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = None
    role: UserRole | None = None
    status: UserStatus | None = None
    department: str | None = None


class PushTokenRequest(BaseModel):
    """Null token clears the registration."""

    push_token: str | None = None
    notifications_enabled: bool = True


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: str
    phone: str
    role: UserRole
    status: UserStatus
    source: UserSource
    department: str
    has_push_token: bool = False
    notifications_enabled: bool
    created_at: datetime | None = None
    last_active: datetime | None = None
    total_issues: int
    resolved_issues: int
    open_issues: int


class UserSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    active: int
    blocked: int
    mobile: int
    staff: int
    with_push_tokens: int
    by_role: dict[str, int]
