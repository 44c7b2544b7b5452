"""Firestore-backed user repository (implements IUserRepository)."""

from __future__ import annotations

from typing import Any

from civic_admin.application.dtos.user import UserCreate, UserUpdate
from civic_admin.domain.entities import AppUser
from civic_admin.domain.enums import UserRole, UserSource, UserStatus
from civic_admin.infrastructure.exceptions import DocumentNotFoundError
from civic_admin.infrastructure.firebase._rest_client import FirestoreRESTClient
from civic_admin.infrastructure.firebase.collections import (
    COLLECTION_USERS,
    SUBCOLLECTION_USER_NOTIFICATIONS,
)
from civic_admin.infrastructure.firebase.repositories._mapping import user_from_document
from civic_admin.shared.utils.datetime import utc_now


class FirestoreUserRepository:
    """User repository over the ``users`` collection.

    Document IDs are the auth UIDs written by the mobile app; users created
    from the portal get a generated ID.
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_USERS)

    async def list_all(self) -> list[AppUser]:
        return [user_from_document(s.id, s.to_dict()) async for s in self._coll.stream()]

    async def list_by_role(self, role: UserRole) -> list[AppUser]:
        q = self._coll.where("role", "==", role.value)
        return [user_from_document(s.id, s.to_dict()) async for s in q.stream()]

    async def get_by_id(self, user_id: str) -> AppUser | None:
        doc = await self._coll.document(user_id).get()
        if not doc:
            return None
        return user_from_document(doc.id, doc.to_dict())

    async def create(self, data: UserCreate) -> AppUser:
        now = utc_now()
        ref = await self._coll.add(
            {
                "email": data.email,
                "displayName": data.display_name,
                "phone": data.phone,
                "role": data.role.value,
                "status": UserStatus.ACTIVE.value,
                "source": UserSource.ADMIN_CREATED.value,
                "department": data.department,
                "notificationsEnabled": True,
                "createdAt": now,
                "lastActive": now,
            }
        )
        return AppUser(
            id=ref.id,
            email=data.email,
            display_name=data.display_name,
            phone=data.phone,
            role=data.role,
            status=UserStatus.ACTIVE,
            source=UserSource.ADMIN_CREATED,
            department=data.department,
            created_at=now,
            last_active=now,
        )

    async def update(self, user_id: str, changes: UserUpdate) -> AppUser | None:
        updates: dict[str, Any] = {}
        if changes.display_name is not None:
            updates["displayName"] = changes.display_name
        if changes.phone is not None:
            updates["phone"] = changes.phone
        if changes.role is not None:
            updates["role"] = changes.role.value
        if changes.status is not None:
            updates["status"] = changes.status.value
        if changes.department is not None:
            updates["department"] = changes.department
        updates["updatedAt"] = utc_now()
        try:
            await self._coll.document(user_id).update(updates)
        except DocumentNotFoundError:
            return None
        return await self.get_by_id(user_id)

    async def set_status(self, user_id: str, status: UserStatus) -> None:
        await self._coll.document(user_id).update(
            {"status": status.value, "updatedAt": utc_now()}
        )

    async def set_push_token(
        self, user_id: str, token: str | None, notifications_enabled: bool
    ) -> None:
        await self._coll.document(user_id).update(
            {
                "pushToken": token,
                "notificationsEnabled": notifications_enabled,
                "pushTokenUpdatedAt": utc_now(),
            }
        )

    async def add_in_app_notifications(
        self,
        user_ids: list[str],
        title: str,
        body: str,
        notification_type: str,
        related_issue_id: str | None,
    ) -> None:
        """Write one unread notification per user through a single commit."""
        if not user_ids:
            return
        now = utc_now()
        batch = self._client.batch()
        for user_id in user_ids:
            ref = self._coll.document(user_id).collection(SUBCOLLECTION_USER_NOTIFICATIONS).document()
            batch.set(
                ref,
                {
                    "title": title,
                    "body": body,
                    "type": notification_type,
                    "read": False,
                    "createdAt": now,
                    "relatedIssueId": related_issue_id,
                },
            )
        await batch.commit()
