"""Authenticated caller, decoded from the bearer token."""

from dataclasses import dataclass

from civic_admin.domain.enums import UserRole


@dataclass(frozen=True)
class StaffPrincipal:
    user_id: str
    role: UserRole
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def display(self) -> str:
        """Name recorded as the author of comments and notifications."""
        return self.email or self.user_id
