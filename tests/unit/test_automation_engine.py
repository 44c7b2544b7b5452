"""Tests for AutomationEngine rule management, recipients and firing."""

import pytest

from civic_admin.application.dtos.notification import AutomationRuleCreate
from civic_admin.domain.entities import AppUser, AutomationRule, Issue, NotificationTemplate
from civic_admin.domain.enums import (
    AutomationTrigger,
    IssuePriority,
    NotificationType,
    UserRole,
)
from civic_admin.domain.exceptions import (
    ResourceNotFoundException,
    TemplateNotFoundException,
    ValidationException,
)
from tests.fakes import FakeStore, build_fake_services

ISSUE = Issue(
    id="i1",
    title="Burst pipe",
    category="Water Leak",
    priority=IssuePriority.CRITICAL,
    assigned_department="Water & Sanitation",
    reported_by_id="citizen-1",
)


def _store() -> FakeStore:
    store = FakeStore()
    for user in (
        AppUser(id="admin-1", role=UserRole.ADMIN, push_token="ExponentPushToken[a]"),
        AppUser(id="admin-2", role=UserRole.ADMIN),
        AppUser(
            id="head-water",
            role=UserRole.DEPARTMENT_HEAD,
            department="Water & Sanitation",
            push_token="ExponentPushToken[w]",
        ),
        AppUser(
            id="head-any",
            role=UserRole.DEPARTMENT_HEAD,
            push_token="ExponentPushToken[any]",
        ),
        AppUser(id="citizen-1", push_token="ExponentPushToken[c]"),
    ):
        store.users.users[user.id] = user
    return store


def _rule(rule_id: str, trigger: AutomationTrigger, **kwargs) -> AutomationRule:
    return AutomationRule(id=rule_id, trigger=trigger, **kwargs)


class TestRuleManagement:
    async def test_create_checks_condition_and_template(self) -> None:
        services = build_fake_services(_store())
        with pytest.raises(ValidationException):
            await services.automation.create_rule(
                AutomationRuleCreate(trigger=AutomationTrigger.ISSUE_CREATED, condition="bogus")
            )
        with pytest.raises(TemplateNotFoundException):
            await services.automation.create_rule(
                AutomationRuleCreate(trigger=AutomationTrigger.ISSUE_CREATED, template_id="t-x")
            )
        rule = await services.automation.create_rule(
            AutomationRuleCreate(
                trigger=AutomationTrigger.ISSUE_CREATED, condition="priority=Critical"
            )
        )
        assert rule.times_triggered == 0

    async def test_toggle_missing_rule(self) -> None:
        services = build_fake_services(_store())
        with pytest.raises(ResourceNotFoundException):
            await services.automation.toggle_rule("nope", False)


class TestFire:
    async def test_issue_created_goes_to_admins_with_tokens(self) -> None:
        store = _store()
        store.automation_rules.rules["r1"] = _rule("r1", AutomationTrigger.ISSUE_CREATED)
        services = build_fake_services(store)

        fired = await services.automation.fire(AutomationTrigger.ISSUE_CREATED, ISSUE)

        assert fired == 1
        assert store.push.sent[0]["tokens"] == ["ExponentPushToken[a]"]
        assert store.push.sent[0]["title"] == "New Issue Reported"
        assert store.push.sent[0]["body"] == '"Burst pipe" - Water Leak (Critical)'
        assert store.push.sent[0]["data"] == {"type": "automated", "issueId": "i1"}
        log = store.logs.logs[0]
        assert log.type == NotificationType.AUTOMATED
        assert log.sent_by == "automation"
        assert log.related_issue_id == "i1"

    async def test_assigned_goes_to_own_department_head(self) -> None:
        store = _store()
        store.automation_rules.rules["r1"] = _rule("r1", AutomationTrigger.ISSUE_ASSIGNED)
        services = build_fake_services(store)
        await services.automation.fire(AutomationTrigger.ISSUE_ASSIGNED, ISSUE)
        assert store.push.sent[0]["tokens"] == ["ExponentPushToken[w]"]

    async def test_assigned_falls_back_to_heads_without_department(self) -> None:
        store = _store()
        store.automation_rules.rules["r1"] = _rule("r1", AutomationTrigger.ISSUE_ASSIGNED)
        services = build_fake_services(store)
        issue = Issue(id="i2", title="Smog", assigned_department="Environment")
        await services.automation.fire(AutomationTrigger.ISSUE_ASSIGNED, issue)
        assert store.push.sent[0]["tokens"] == ["ExponentPushToken[any]"]

    async def test_disabled_and_non_matching_rules_do_not_fire(self) -> None:
        store = _store()
        store.automation_rules.rules["off"] = _rule(
            "off", AutomationTrigger.COMMENT_ADDED, enabled=False
        )
        store.automation_rules.rules["low"] = _rule(
            "low", AutomationTrigger.COMMENT_ADDED, condition="priority=Low"
        )
        services = build_fake_services(store)
        assert await services.automation.fire(AutomationTrigger.COMMENT_ADDED, ISSUE) == 0
        assert store.push.sent == []

    async def test_stored_template_is_rendered(self) -> None:
        store = _store()
        store.templates.templates["t1"] = NotificationTemplate(
            id="t1",
            name="Update",
            title="Update on {{ issue.title }}",
            body="Now {{ issue.status }}",
        )
        store.automation_rules.rules["r1"] = _rule(
            "r1", AutomationTrigger.STATUS_CHANGED, template_id="t1"
        )
        services = build_fake_services(store)
        await services.automation.fire(AutomationTrigger.STATUS_CHANGED, ISSUE)
        assert store.push.sent[0]["title"] == "Update on Burst pipe"
        assert store.push.sent[0]["body"] == "Now Open"
        assert store.push.sent[0]["tokens"] == ["ExponentPushToken[c]"]

    async def test_missing_template_falls_back_to_default_text(self) -> None:
        store = _store()
        store.automation_rules.rules["r1"] = _rule(
            "r1", AutomationTrigger.PRIORITY_CHANGED, template_id="deleted"
        )
        services = build_fake_services(store)
        await services.automation.fire(AutomationTrigger.PRIORITY_CHANGED, ISSUE)
        assert store.push.sent[0]["title"] == "Issue Priority Changed"

    async def test_trigger_counter_recorded(self) -> None:
        store = _store()
        store.automation_rules.rules["r1"] = _rule(
            "r1", AutomationTrigger.ISSUE_CREATED, times_triggered=4
        )
        services = build_fake_services(store)
        await services.automation.fire(AutomationTrigger.ISSUE_CREATED, ISSUE)
        rule = store.automation_rules.rules["r1"]
        assert rule.times_triggered == 5
        assert rule.last_triggered is not None

    async def test_reporter_without_token_gets_nothing(self) -> None:
        store = _store()
        store.users.users["citizen-1"].push_token = None
        store.automation_rules.rules["r1"] = _rule("r1", AutomationTrigger.COMMENT_ADDED)
        services = build_fake_services(store)
        assert await services.automation.fire(AutomationTrigger.COMMENT_ADDED, ISSUE) == 0
