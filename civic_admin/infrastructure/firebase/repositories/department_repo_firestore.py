"""Firestore-backed department and auto-assignment rule repositories."""

from __future__ import annotations

from typing import Any

from civic_admin.application.dtos.department import (
    AssignmentRuleCreate,
    DepartmentCreate,
    DepartmentUpdate,
)
from civic_admin.domain.entities import AutoAssignmentRule, Department
from civic_admin.infrastructure.exceptions import DocumentNotFoundError
from civic_admin.infrastructure.firebase._rest_client import FirestoreRESTClient
from civic_admin.infrastructure.firebase.collections import (
    COLLECTION_ASSIGNMENT_RULES,
    COLLECTION_DEPARTMENTS,
)
from civic_admin.infrastructure.firebase.repositories._mapping import (
    assignment_rule_from_document,
    department_from_document,
)
from civic_admin.shared.utils.datetime import utc_now

_DEPARTMENT_FIELDS = {
    "name": "name",
    "description": "description",
    "head": "head",
    "email": "email",
    "phone": "phone",
    "working_hours": "workingHours",
    "keywords": "keywords",
    "categories": "categories",
    "active": "active",
}


class FirestoreDepartmentRepository:
    """Department repository over the ``departments`` collection."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_DEPARTMENTS)

    async def list_all(self) -> list[Department]:
        """Return departments in name order (the order keyword matching scans them in)."""
        departments = [
            department_from_document(s.id, s.to_dict()) async for s in self._coll.stream()
        ]
        return sorted(departments, key=lambda d: d.name.lower())

    async def get_by_id(self, department_id: str) -> Department | None:
        doc = await self._coll.document(department_id).get()
        if not doc:
            return None
        return department_from_document(doc.id, doc.to_dict())

    async def get_by_name(self, name: str) -> Department | None:
        """Return department by exact name (server-side where query, at most one doc)."""
        q = self._coll.where("name", "==", name).limit(1)
        async for snapshot in q.stream():
            return department_from_document(snapshot.id, snapshot.to_dict())
        return None

    async def create(self, data: DepartmentCreate) -> Department:
        now = utc_now()
        ref = await self._coll.add(
            {
                "name": data.name,
                "description": data.description,
                "head": data.head,
                "email": data.email,
                "phone": data.phone,
                "workingHours": data.working_hours,
                "keywords": list(data.keywords),
                "categories": list(data.categories),
                "active": data.active,
                "issuesAssigned": 0,
                "issuesResolved": 0,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        return Department(
            id=ref.id,
            name=data.name,
            description=data.description,
            head=data.head,
            email=data.email,
            phone=data.phone,
            working_hours=data.working_hours,
            keywords=list(data.keywords),
            categories=list(data.categories),
            active=data.active,
        )

    async def update(self, department_id: str, changes: DepartmentUpdate) -> Department | None:
        """Update the given fields; return updated department or None if not found."""
        updates: dict[str, Any] = {}
        for attr, field_name in _DEPARTMENT_FIELDS.items():
            value = getattr(changes, attr)
            if value is not None:
                updates[field_name] = list(value) if isinstance(value, list) else value
        updates["updatedAt"] = utc_now()
        try:
            await self._coll.document(department_id).update(updates)
        except DocumentNotFoundError:
            return None
        return await self.get_by_id(department_id)

    async def delete(self, department_id: str) -> None:
        await self._coll.document(department_id).delete()


class FirestoreAssignmentRuleRepository:
    """Auto-assignment rules over the ``autoAssignmentRules`` collection."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_ASSIGNMENT_RULES)

    async def list_all(self) -> list[AutoAssignmentRule]:
        rules = [
            assignment_rule_from_document(s.id, s.to_dict()) async for s in self._coll.stream()
        ]
        return sorted(rules, key=lambda r: r.category.lower())

    async def create(self, data: AssignmentRuleCreate) -> AutoAssignmentRule:
        ref = await self._coll.add(
            {
                "category": data.category,
                "department": data.department,
                "priority": data.priority.value,
                "enabled": data.enabled,
                "createdAt": utc_now(),
            }
        )
        return AutoAssignmentRule(
            id=ref.id,
            category=data.category,
            department=data.department,
            priority=data.priority,
            enabled=data.enabled,
        )

    async def set_enabled(self, rule_id: str, enabled: bool) -> AutoAssignmentRule | None:
        ref = self._coll.document(rule_id)
        try:
            await ref.update({"enabled": enabled})
        except DocumentNotFoundError:
            return None
        doc = await ref.get()
        return assignment_rule_from_document(doc.id, doc.to_dict()) if doc else None

    async def delete(self, rule_id: str) -> None:
        await self._coll.document(rule_id).delete()
