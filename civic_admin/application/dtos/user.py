"""DTOs for user management use cases."""

from dataclasses import dataclass

from civic_admin.domain.enums import UserRole, UserSource, UserStatus


@dataclass(frozen=True)
class UserFilter:
    """``view`` is 'mobile' (app users) or 'staff' (portal roles)."""

    role: UserRole | None = None
    status: UserStatus | None = None
    source: UserSource | None = None
    view: str | None = None
    search: str | None = None


@dataclass(frozen=True)
class UserCreate:
    email: str
    display_name: str
    role: UserRole = UserRole.CITIZEN
    phone: str = ""
    department: str = ""


@dataclass(frozen=True)
class UserUpdate:
    display_name: str | None = None
    phone: str | None = None
    role: UserRole | None = None
    status: UserStatus | None = None
    department: str | None = None


@dataclass(frozen=True)
class UserSummary:
    total: int
    active: int
    blocked: int
    mobile: int
    staff: int
    with_push_tokens: int
    by_role: dict[str, int]
