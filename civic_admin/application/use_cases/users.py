"""User management for the admin portal."""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import TYPE_CHECKING

from civic_admin.application.dtos.user import UserFilter, UserSummary
from civic_admin.domain.enums import IssueStatus, UserSource, UserStatus
from civic_admin.domain.exceptions import ResourceNotFoundException, ValidationException
from civic_admin.shared.logging import get_logger

if TYPE_CHECKING:
    from civic_admin.application.dtos.user import UserCreate, UserUpdate
    from civic_admin.application.interfaces.repositories import IIssueRepository, IUserRepository
    from civic_admin.domain.entities import AppUser, Issue

logger = get_logger(__name__)

VIEW_MOBILE = "mobile"
VIEW_STAFF = "staff"


def _is_mobile(user: AppUser) -> bool:
    return user.source == UserSource.MOBILE_APP and not user.is_staff


def user_matches(user: AppUser, f: UserFilter) -> bool:
    if f.role is not None and user.role != f.role:
        return False
    if f.status is not None and user.status != f.status:
        return False
    if f.source is not None and user.source != f.source:
        return False
    if f.view == VIEW_MOBILE and not _is_mobile(user):
        return False
    if f.view == VIEW_STAFF and not user.is_staff:
        return False
    if f.search:
        needle = f.search.strip().lower()
        haystack = " ".join((user.email, user.display_name, user.phone)).lower()
        if needle and needle not in haystack:
            return False
    return True


def attach_issue_counts(users: list[AppUser], issues: list[Issue]) -> list[AppUser]:
    """Fill total/resolved/open counters from each issue's reporter id."""
    total: Counter = Counter()
    resolved: Counter = Counter()
    for issue in issues:
        if not issue.reported_by_id:
            continue
        total[issue.reported_by_id] += 1
        if issue.status == IssueStatus.RESOLVED:
            resolved[issue.reported_by_id] += 1
    for user in users:
        user.total_issues = total[user.id]
        user.resolved_issues = resolved[user.id]
        user.open_issues = user.total_issues - user.resolved_issues
    return users


class UserService:
    def __init__(self, user_repo: IUserRepository, issue_repo: IIssueRepository) -> None:
        self.user_repo = user_repo
        self.issue_repo = issue_repo

    async def list_users(self, f: UserFilter) -> list[AppUser]:
        users = [u for u in await self.user_repo.list_all() if user_matches(u, f)]
        return attach_issue_counts(users, await self.issue_repo.list_all())

    async def get_user(self, user_id: str) -> AppUser:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        attach_issue_counts([user], await self.issue_repo.list_all())
        return user

    async def create_user(self, data: UserCreate) -> AppUser:
        email = data.email.strip().lower()
        if "@" not in email:
            raise ValidationException("A valid email is required", field="email")
        if any(u.email.lower() == email for u in await self.user_repo.list_all()):
            raise ValidationException(f"User with email {email} already exists", field="email")
        user = await self.user_repo.create(replace(data, email=email))
        logger.info("Created %s user %s", user.role.value, user.id)
        return user

    async def update_user(self, user_id: str, changes: UserUpdate) -> AppUser:
        user = await self.user_repo.update(user_id, changes)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def toggle_status(self, user_id: str) -> AppUser:
        """Block an active user, reactivate anyone else."""
        user = await self.get_user(user_id)
        new_status = user.toggled_status()
        await self.user_repo.set_status(user_id, new_status)
        logger.info("User %s status %s -> %s", user_id, user.status.value, new_status.value)
        user.status = new_status
        return user

    async def summary(self) -> UserSummary:
        users = await self.user_repo.list_all()
        return UserSummary(
            total=len(users),
            active=sum(1 for u in users if u.status == UserStatus.ACTIVE),
            blocked=sum(1 for u in users if u.status == UserStatus.BLOCKED),
            mobile=sum(1 for u in users if _is_mobile(u)),
            staff=sum(1 for u in users if u.is_staff),
            with_push_tokens=sum(1 for u in users if u.push_token),
            by_role=dict(Counter(u.role.value for u in users)),
        )
