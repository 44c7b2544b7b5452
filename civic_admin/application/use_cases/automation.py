"""Automation engine: fire templated notifications on issue events.

Replaces the portal's real-time listener with explicit calls from the
issue use cases and the auto-assignment worker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from civic_admin.application.dtos.notification import AutomationRuleCreate, NotificationPayload
from civic_admin.application.services.automation_conditions import (
    condition_matches,
    parse_condition,
)
from civic_admin.domain.enums import (
    AutomationTrigger,
    NotificationTarget,
    NotificationType,
    UserRole,
)
from civic_admin.domain.exceptions import (
    CivicAdminException,
    ResourceNotFoundException,
    TemplateNotFoundException,
)
from civic_admin.shared.logging import get_logger
from civic_admin.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from civic_admin.application.interfaces.repositories import (
        IAutomationRuleRepository,
        ITemplateRepository,
        IUserRepository,
    )
    from civic_admin.application.interfaces.services import INotificationTemplateRenderer
    from civic_admin.application.use_cases.notifications import NotificationService
    from civic_admin.domain.entities import AppUser, AutomationRule, Issue

logger = get_logger(__name__)


class AutomationEngine:
    """Manages automation rules and fires them for issue events."""

    def __init__(
        self,
        rule_repo: IAutomationRuleRepository,
        template_repo: ITemplateRepository,
        user_repo: IUserRepository,
        notification_service: NotificationService,
        renderer: INotificationTemplateRenderer,
    ) -> None:
        self.rule_repo = rule_repo
        self.template_repo = template_repo
        self.user_repo = user_repo
        self.notification_service = notification_service
        self.renderer = renderer

    async def list_rules(self) -> list[AutomationRule]:
        return await self.rule_repo.list_all()

    async def create_rule(self, data: AutomationRuleCreate) -> AutomationRule:
        """Create a rule after checking its condition and template reference."""
        parse_condition(data.condition)
        if data.template_id and await self.template_repo.get_by_id(data.template_id) is None:
            raise TemplateNotFoundException(data.template_id)
        return await self.rule_repo.create(data)

    async def toggle_rule(self, rule_id: str, enabled: bool) -> AutomationRule:
        rule = await self.rule_repo.set_enabled(rule_id, enabled)
        if rule is None:
            raise ResourceNotFoundException("automation rule", rule_id)
        return rule

    async def delete_rule(self, rule_id: str) -> None:
        await self.rule_repo.delete(rule_id)

    async def _recipients(self, trigger: AutomationTrigger, issue: Issue) -> list[AppUser]:
        if trigger in (AutomationTrigger.ISSUE_CREATED, AutomationTrigger.PRIORITY_CHANGED):
            users = await self.user_repo.list_by_role(UserRole.ADMIN)
        elif trigger == AutomationTrigger.ISSUE_ASSIGNED:
            heads = await self.user_repo.list_by_role(UserRole.DEPARTMENT_HEAD)
            own = [u for u in heads if u.department and u.department == issue.assigned_department]
            users = own or [u for u in heads if not u.department]
        else:
            if not issue.reported_by_id:
                return []
            reporter = await self.user_repo.get_by_id(issue.reported_by_id)
            users = [reporter] if reporter else []
        return [u for u in users if u.push_token]

    async def _texts(self, rule: AutomationRule, issue: Issue) -> tuple[str, str]:
        context = issue.template_context()
        if rule.template_id:
            template = await self.template_repo.get_by_id(rule.template_id)
            if template is not None:
                return self.renderer.render(rule.trigger.value, context, template.title, template.body)
            logger.warning(
                "Automation rule %s references missing template %s", rule.id, rule.template_id
            )
        return self.renderer.render(rule.trigger.value, context)

    async def fire(self, trigger: AutomationTrigger, issue: Issue) -> int:
        """Run every enabled rule for ``trigger`` whose condition matches.

        A failing rule is logged and does not stop the others. Lookup failures
        are logged too, so the action that fired the trigger is never undone.

        Returns:
            Number of rules that sent a notification.
        """
        try:
            rules = [
                r
                for r in await self.rule_repo.list_enabled(trigger)
                if condition_matches(r.condition, issue)
            ]
            if not rules:
                return 0
            recipients = await self._recipients(trigger, issue)
        except CivicAdminException:
            logger.exception("Automation lookup for %s on issue %s failed", trigger.value, issue.id)
            return 0
        fired = 0
        for rule in rules:
            if not recipients:
                continue
            try:
                title, body = await self._texts(rule, issue)
                result = await self.notification_service.send_to_users(
                    NotificationPayload(
                        title=title,
                        body=body,
                        type=NotificationType.AUTOMATED,
                        target=NotificationTarget.INDIVIDUAL,
                        sent_by="automation",
                        related_issue_id=issue.id,
                        data={"issueId": issue.id},
                    ),
                    recipients,
                )
                await self.rule_repo.record_trigger(
                    rule.id, rule.times_triggered + 1, utc_now()
                )
            except CivicAdminException:
                logger.exception("Automation rule %s (%s) failed", rule.id, rule.description)
                continue
            fired += 1
            logger.info(
                "Automation %r fired for issue %s: %d notifications sent",
                rule.description or rule.id,
                issue.id,
                result.success_count,
            )
        return fired
