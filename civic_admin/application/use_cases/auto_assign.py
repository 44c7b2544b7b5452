"""Auto-assignment of unassigned issues, duplicate flagging and new-issue processing.

``process_new_issues`` is the polling counterpart of a real-time listener:
the background worker calls it every few seconds.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from civic_admin.application.dtos.department import BulkAssignResult
from civic_admin.application.dtos.issue import IssueUpdate
from civic_admin.application.services.department_matcher import (
    issue_match_text,
    match_category_rule,
    match_department,
)
from civic_admin.application.services.duplicate_detection import find_duplicates
from civic_admin.domain.enums import AutomationTrigger, CommentType
from civic_admin.domain.exceptions import CivicAdminException, ResourceNotFoundException
from civic_admin.shared.logging import get_logger
from civic_admin.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from civic_admin.application.dtos.issue import DuplicateMatch
    from civic_admin.application.interfaces.repositories import (
        IAssignmentRuleRepository,
        IDepartmentRepository,
        IIssueRepository,
    )
    from civic_admin.application.use_cases.automation import AutomationEngine
    from civic_admin.application.use_cases.image_analysis import ImageAnalysisService
    from civic_admin.domain.entities import AutoAssignmentRule, Department, Issue

logger = get_logger(__name__)

SYSTEM_AUTHOR = "System"
AUTO_ASSIGN_EMAIL = "auto-assign@system"
DUPLICATE_EMAIL = "duplicate-detection@system"


class AutoAssignService:
    """Routes unassigned issues to departments and runs new-issue checks."""

    def __init__(
        self,
        issue_repo: IIssueRepository,
        department_repo: IDepartmentRepository,
        rule_repo: IAssignmentRuleRepository,
        automation: AutomationEngine | None = None,
        image_analysis: ImageAnalysisService | None = None,
    ) -> None:
        self.issue_repo = issue_repo
        self.department_repo = department_repo
        self.rule_repo = rule_repo
        self.automation = automation
        self.image_analysis = image_analysis
        self._seen: set[str] = set()
        self._announced: set[str] = set()
        self._started_at = utc_now()

    async def assign_issue(
        self,
        issue: Issue,
        departments: list[Department],
        rules: list[AutoAssignmentRule],
    ) -> str | None:
        """Assign by keyword match, falling back to the category rule.

        Returns:
            Department name, or None when nothing matched.
        """
        department = match_department(issue_match_text(issue), departments)
        if department is not None:
            name = department.name
            reason = "keywords"
        else:
            rule = match_category_rule(issue.category, rules)
            if rule is None:
                return None
            name = rule.department
            reason = f'category "{issue.category}"'

        await self.issue_repo.update(issue.id, IssueUpdate(assigned_department=name))
        await self.issue_repo.add_comment(
            issue.id,
            f'Auto-assigned to "{name}" based on {reason}',
            author=SYSTEM_AUTHOR,
            author_email=AUTO_ASSIGN_EMAIL,
            comment_type=CommentType.ASSIGNMENT,
        )
        logger.info("Auto-assigned issue %s (%r) -> %s", issue.id, issue.title[:60], name)
        if self.automation is not None:
            issue.assigned_department = name
            await self.automation.fire(AutomationTrigger.ISSUE_ASSIGNED, issue)
        return name

    async def run_bulk_auto_assign(self) -> BulkAssignResult:
        """Route every unassigned issue once."""
        departments = await self.department_repo.list_all()
        rules = await self.rule_repo.list_all()
        issues = await self.issue_repo.list_unassigned()
        assigned = 0
        for issue in issues:
            if await self.assign_issue(issue, departments, rules):
                assigned += 1
        logger.info("Bulk auto-assign complete: %d/%d issues routed", assigned, len(issues))
        return BulkAssignResult(assigned=assigned, scanned=len(issues))

    async def find_duplicates_for(self, issue_id: str, now: datetime | None = None) -> list[DuplicateMatch]:
        issue = await self.issue_repo.get_by_id(issue_id)
        if issue is None:
            raise ResourceNotFoundException("issue", issue_id)
        return find_duplicates(issue, await self.issue_repo.list_all(), now or utc_now())

    async def flag_duplicate(self, issue_id: str, match: DuplicateMatch) -> None:
        await self.issue_repo.set_duplicate(issue_id, match.issue_id, match.score)
        await self.issue_repo.add_comment(
            issue_id,
            f"Possible duplicate detected ({round(match.score * 100)}% match). "
            f"Original issue ID: {match.issue_id}",
            author=SYSTEM_AUTHOR,
            author_email=DUPLICATE_EMAIL,
            comment_type=CommentType.ASSIGNMENT,
        )
        logger.info(
            "Flagged issue %s as potential duplicate of %s (score %.2f)",
            issue_id,
            match.issue_id,
            match.score,
        )

    async def _process_issue(
        self,
        issue: Issue,
        departments: list[Department],
        rules: list[AutoAssignmentRule],
        all_issues: list[Issue],
        now: datetime,
    ) -> bool:
        """Assign, flag duplicates, analyze the image and announce the issue.

        Each step fails on its own; the others still run.

        Returns:
            False when the assignment write failed, so a later pass retries it.
        """
        assigned = True
        try:
            await self.assign_issue(issue, departments, rules)
        except CivicAdminException:
            logger.exception("Auto-assignment failed for issue %s", issue.id)
            assigned = False

        if issue.duplicate_of_id is None:
            try:
                matches = find_duplicates(issue, all_issues, now)
                if matches:
                    await self.flag_duplicate(issue.id, matches[0])
            except CivicAdminException:
                logger.exception("Duplicate check failed for issue %s", issue.id)

        if (
            self.image_analysis is not None
            and self.image_analysis.enabled
            and issue.image_url
            and issue.ai_analysis is None
        ):
            try:
                await self.image_analysis.analyze(issue)
            except CivicAdminException:
                logger.exception("Image analysis failed for issue %s", issue.id)

        if (
            self.automation is not None
            and issue.id not in self._announced
            and issue.reported_at is not None
            and issue.reported_at >= self._started_at
        ):
            self._announced.add(issue.id)
            await self.automation.fire(AutomationTrigger.ISSUE_CREATED, issue)
        return assigned

    async def process_new_issues(self) -> int:
        """Handle unassigned issues not seen before by this process.

        Ids that left the unassigned set are forgotten, so an issue that is
        unassigned again is processed again. ``issue_created`` automation
        fires once per issue, and only for issues reported after the service
        started, so a restart does not re-notify old issues.

        Returns:
            Number of issues processed in this pass.
        """
        unassigned = await self.issue_repo.list_unassigned()
        self._seen &= {i.id for i in unassigned}
        fresh = [i for i in unassigned if i.id not in self._seen]
        if not fresh:
            return 0
        departments = await self.department_repo.list_all()
        rules = await self.rule_repo.list_all()
        all_issues = await self.issue_repo.list_all()
        self._announced &= {i.id for i in all_issues}
        now = utc_now()
        for issue in fresh:
            if await self._process_issue(issue, departments, rules, all_issues, now):
                self._seen.add(issue.id)
        return len(fresh)
