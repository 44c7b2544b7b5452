"""Firestore-backed notification log, template and automation rule repositories."""

from __future__ import annotations

from datetime import UTC, datetime

from civic_admin.application.dtos.notification import (
    AutomationRuleCreate,
    NotificationLogCreate,
    TemplateCreate,
)
from civic_admin.domain.entities import AutomationRule, NotificationLog, NotificationTemplate
from civic_admin.domain.enums import AutomationTrigger
from civic_admin.infrastructure.exceptions import DocumentNotFoundError
from civic_admin.infrastructure.firebase._rest_client import FirestoreRESTClient
from civic_admin.infrastructure.firebase.collections import (
    COLLECTION_AUTOMATION_RULES,
    COLLECTION_NOTIFICATION_LOGS,
    COLLECTION_NOTIFICATION_TEMPLATES,
)
from civic_admin.infrastructure.firebase.repositories._mapping import (
    automation_rule_from_document,
    notification_log_from_document,
    template_from_document,
)
from civic_admin.shared.utils.datetime import utc_now


class FirestoreNotificationLogRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_NOTIFICATION_LOGS)

    async def add(self, data: NotificationLogCreate) -> str:
        ref = await self._coll.add(
            {
                "title": data.title,
                "body": data.body,
                "type": data.type.value,
                "target": data.target.value,
                "priority": data.priority.value,
                "sentAt": utc_now(),
                "sentBy": data.sent_by,
                "recipientCount": data.recipient_count,
                "successCount": data.success_count,
                "failureCount": data.failure_count,
                "status": data.status.value,
                "relatedIssueId": data.related_issue_id,
            }
        )
        return ref.id

    async def list_recent(self, limit: int | None = None) -> list[NotificationLog]:
        """Return log entries newest first (server-side order and limit)."""
        q = self._coll.order_by("sentAt", "DESCENDING").limit(limit)
        return [notification_log_from_document(s.id, s.to_dict()) async for s in q.stream()]


class FirestoreTemplateRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_NOTIFICATION_TEMPLATES)

    async def list_all(self) -> list[NotificationTemplate]:
        templates = [template_from_document(s.id, s.to_dict()) async for s in self._coll.stream()]
        return sorted(templates, key=lambda t: t.name.lower())

    async def get_by_id(self, template_id: str) -> NotificationTemplate | None:
        doc = await self._coll.document(template_id).get()
        if not doc:
            return None
        return template_from_document(doc.id, doc.to_dict())

    async def create(self, data: TemplateCreate) -> NotificationTemplate:
        now = utc_now()
        ref = await self._coll.add(
            {
                "name": data.name,
                "title": data.title,
                "body": data.body,
                "type": data.type.value,
                "createdAt": now,
            }
        )
        return NotificationTemplate(
            id=ref.id, name=data.name, title=data.title, body=data.body, type=data.type, created_at=now
        )

    async def delete(self, template_id: str) -> None:
        await self._coll.document(template_id).delete()


class FirestoreAutomationRuleRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_AUTOMATION_RULES)

    async def list_all(self) -> list[AutomationRule]:
        rules = []
        async for s in self._coll.stream():
            rule = automation_rule_from_document(s.id, s.to_dict())
            if rule is not None:
                rules.append(rule)
        return sorted(
            rules,
            key=lambda r: r.created_at or datetime.min.replace(tzinfo=UTC),
        )

    async def list_enabled(self, trigger: AutomationTrigger) -> list[AutomationRule]:
        q = self._coll.where("trigger", "==", trigger.value).where("enabled", "==", True)
        rules = []
        async for s in q.stream():
            rule = automation_rule_from_document(s.id, s.to_dict())
            if rule is not None:
                rules.append(rule)
        return rules

    async def create(self, data: AutomationRuleCreate) -> AutomationRule:
        now = utc_now()
        ref = await self._coll.add(
            {
                "trigger": data.trigger.value,
                "condition": data.condition,
                "templateId": data.template_id or "",
                "description": data.description,
                "enabled": data.enabled,
                "timesTriggered": 0,
                "lastTriggered": None,
                "createdAt": now,
            }
        )
        return AutomationRule(
            id=ref.id,
            trigger=data.trigger,
            condition=data.condition,
            template_id=data.template_id,
            description=data.description,
            enabled=data.enabled,
            created_at=now,
        )

    async def set_enabled(self, rule_id: str, enabled: bool) -> AutomationRule | None:
        ref = self._coll.document(rule_id)
        try:
            await ref.update({"enabled": enabled})
        except DocumentNotFoundError:
            return None
        doc = await ref.get()
        return automation_rule_from_document(doc.id, doc.to_dict()) if doc else None

    async def record_trigger(self, rule_id: str, times_triggered: int, at: datetime) -> None:
        await self._coll.document(rule_id).update(
            {"timesTriggered": times_triggered, "lastTriggered": at}
        )

    async def delete(self, rule_id: str) -> None:
        await self._coll.document(rule_id).delete()
