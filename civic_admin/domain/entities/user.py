"""Portal and app user entity."""

from dataclasses import dataclass
from datetime import datetime

from civic_admin.domain.enums import STAFF_ROLES, UserRole, UserSource, UserStatus


@dataclass
class AppUser:
    """User record shared by the mobile app and the admin portal.

    Issue counters are not stored; they are filled in from ``reportedById``
    when users are listed.
    """

    id: str
    email: str = ""
    display_name: str = ""
    phone: str = ""
    role: UserRole = UserRole.CITIZEN
    status: UserStatus = UserStatus.ACTIVE
    source: UserSource = UserSource.MOBILE_APP
    department: str = ""
    push_token: str | None = None
    notifications_enabled: bool = True
    created_at: datetime | None = None
    last_active: datetime | None = None
    total_issues: int = 0
    resolved_issues: int = 0
    open_issues: int = 0

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def has_push_token(self) -> bool:
        return bool(self.push_token)

    @property
    def can_receive_push(self) -> bool:
        """True when a push token is registered and notifications are not turned off."""
        return bool(self.push_token) and self.notifications_enabled

    def toggled_status(self) -> UserStatus:
        """Status after a block/unblock toggle."""
        if self.status == UserStatus.ACTIVE:
            return UserStatus.BLOCKED
        return UserStatus.ACTIVE
