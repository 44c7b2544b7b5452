"""Issue management use cases: query, triage, comments, export and SLA."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING

from civic_admin.application.dtos.issue import BulkUpdateResult, IssueFilter, IssueUpdate
from civic_admin.application.services.analytics import sla_status
from civic_admin.application.services.issue_export import issues_to_csv
from civic_admin.domain.enums import AutomationTrigger, CommentType, IssueStatus
from civic_admin.domain.exceptions import ResourceNotFoundException, ValidationException

if TYPE_CHECKING:
    from civic_admin.application.dtos.analytics import SlaStatus
    from civic_admin.application.dtos.auth import StaffPrincipal
    from civic_admin.application.interfaces.repositories import IIssueRepository
    from civic_admin.application.use_cases.automation import AutomationEngine
    from civic_admin.domain.entities import Comment, Issue


def matches_filter(issue: Issue, f: IssueFilter) -> bool:
    """True when the issue passes every set filter."""
    if f.status is not None and issue.status != f.status:
        return False
    if f.priority is not None and issue.priority != f.priority:
        return False
    if f.category and issue.category.lower() != f.category.lower():
        return False
    if f.department and issue.assigned_department != f.department:
        return False
    if f.unassigned and issue.is_assigned:
        return False
    if f.search:
        needle = f.search.strip().lower()
        haystack = " ".join(
            (issue.title, issue.description, issue.address, issue.reported_by)
        ).lower()
        if needle and needle not in haystack:
            return False
    return True


class IssueService:
    """Staff operations on issues. Mutations fire automation triggers."""

    def __init__(
        self,
        issue_repo: IIssueRepository,
        automation: AutomationEngine | None = None,
    ) -> None:
        self.issue_repo = issue_repo
        self.automation = automation

    async def list_issues(
        self, f: IssueFilter, skip: int = 0, limit: int = 50
    ) -> tuple[list[Issue], int]:
        """Return (page, total matching), newest first."""
        matching = [i for i in await self.issue_repo.list_all() if matches_filter(i, f)]
        return matching[skip : skip + limit], len(matching)

    async def map_issues(self, f: IssueFilter) -> list[Issue]:
        """Issues with coordinates, for the map view."""
        return [
            i for i in await self.issue_repo.list_all() if i.has_location and matches_filter(i, f)
        ]

    async def get_issue(self, issue_id: str) -> Issue:
        issue = await self.issue_repo.get_by_id(issue_id)
        if issue is None:
            raise ResourceNotFoundException("issue", issue_id)
        return issue

    async def update_issue(
        self, issue_id: str, changes: IssueUpdate, actor: StaffPrincipal
    ) -> Issue:
        """Apply a staff edit, record status changes and fire triggers."""
        if changes.is_empty():
            raise ValidationException("No changes given")
        before = await self.get_issue(issue_id)
        if changes.assigned_department is not None:
            changes = replace(changes, assigned_department=changes.assigned_department.strip())
        await self.issue_repo.update(issue_id, changes)

        after = replace(
            before,
            status=changes.status or before.status,
            priority=changes.priority or before.priority,
            assigned_department=(
                before.assigned_department
                if changes.assigned_department is None
                else changes.assigned_department
            ),
            admin_notes=before.admin_notes if changes.admin_notes is None else changes.admin_notes,
        )

        if after.status != before.status:
            await self.issue_repo.add_comment(
                issue_id,
                f'Status changed from "{before.status.value}" to "{after.status.value}"',
                author=actor.display,
                author_email=actor.email or "admin",
                comment_type=CommentType.STATUS_CHANGE,
            )
        if self.automation is not None:
            if after.status != before.status:
                await self.automation.fire(AutomationTrigger.STATUS_CHANGED, after)
            if after.priority != before.priority:
                await self.automation.fire(AutomationTrigger.PRIORITY_CHANGED, after)
            if after.is_assigned and after.assigned_department != before.assigned_department:
                await self.automation.fire(AutomationTrigger.ISSUE_ASSIGNED, after)
        return await self.get_issue(issue_id)

    async def change_status(
        self, issue_id: str, status: IssueStatus, actor: StaffPrincipal
    ) -> Issue:
        return await self.update_issue(issue_id, IssueUpdate(status=status), actor)

    async def bulk_update(
        self, issue_ids: Sequence[str], changes: IssueUpdate, actor: StaffPrincipal
    ) -> BulkUpdateResult:
        """Apply the same change to several issues; missing ids are reported, not raised."""
        if not issue_ids:
            raise ValidationException("At least one issue id is required", field="issue_ids")
        updated: list[str] = []
        not_found: list[str] = []
        for issue_id in dict.fromkeys(issue_ids):
            try:
                await self.update_issue(issue_id, changes, actor)
            except ResourceNotFoundException:
                not_found.append(issue_id)
                continue
            updated.append(issue_id)
        return BulkUpdateResult(updated=updated, not_found=not_found)

    async def delete_issue(self, issue_id: str) -> None:
        await self.get_issue(issue_id)
        await self.issue_repo.delete(issue_id)

    async def list_comments(self, issue_id: str) -> list[Comment]:
        await self.get_issue(issue_id)
        return await self.issue_repo.list_comments(issue_id)

    async def add_comment(self, issue_id: str, text: str, actor: StaffPrincipal) -> Comment:
        if not text.strip():
            raise ValidationException("Comment text is required", field="text")
        issue = await self.get_issue(issue_id)
        comment = await self.issue_repo.add_comment(
            issue_id,
            text.strip(),
            author=actor.display,
            author_email=actor.email or "admin",
            comment_type=CommentType.COMMENT,
        )
        if self.automation is not None:
            await self.automation.fire(AutomationTrigger.COMMENT_ADDED, issue)
        return comment

    async def clear_duplicate(self, issue_id: str) -> Issue:
        await self.get_issue(issue_id)
        await self.issue_repo.set_duplicate(issue_id, None, None)
        return await self.get_issue(issue_id)

    async def export_csv(self, f: IssueFilter) -> str:
        issues = [i for i in await self.issue_repo.list_all() if matches_filter(i, f)]
        return issues_to_csv(issues)

    async def sla_overview(self, now: datetime) -> list[SlaStatus]:
        """SLA position of every unresolved issue, most urgent first."""
        statuses = [
            sla_status(i, now)
            for i in await self.issue_repo.list_all()
            if i.status != IssueStatus.RESOLVED
        ]
        return sorted(statuses, key=lambda s: s.remaining_hours)
