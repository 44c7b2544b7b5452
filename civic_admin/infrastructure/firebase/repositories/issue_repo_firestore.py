"""Firestore-backed issue repository (implements IIssueRepository)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from civic_admin.application.dtos.issue import IssueUpdate
from civic_admin.domain.entities import Comment, Issue
from civic_admin.domain.enums import CommentType
from civic_admin.infrastructure.firebase._rest_client import FirestoreRESTClient
from civic_admin.infrastructure.firebase.collections import (
    COLLECTION_ISSUES,
    SUBCOLLECTION_COMMENTS,
)
from civic_admin.infrastructure.firebase.repositories._mapping import (
    comment_from_document,
    issue_from_document,
)
from civic_admin.shared.utils.datetime import utc_now

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _newest_first(issues: list[Issue]) -> list[Issue]:
    return sorted(issues, key=lambda i: i.reported_at or _EPOCH, reverse=True)


class FirestoreIssueRepository:
    """Issue repository over the ``civicIssues`` collection."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_ISSUES)

    async def list_all(self) -> list[Issue]:
        """Return every issue, newest first.

        Sorted here rather than with orderBy so documents without
        ``reportedAt`` are not dropped by the server.
        """
        issues = [
            issue_from_document(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.stream()
        ]
        return _newest_first(issues)

    async def list_unassigned(self) -> list[Issue]:
        """Issues with an empty or missing ``assignedDepartment``.

        Filtered here: an equality query would skip documents that never
        had the field.
        """
        return [i for i in await self.list_all() if not i.is_assigned]

    async def get_by_id(self, issue_id: str) -> Issue | None:
        doc = await self._coll.document(issue_id).get()
        if not doc:
            return None
        return issue_from_document(doc.id, doc.to_dict())

    async def update(self, issue_id: str, changes: IssueUpdate) -> None:
        updates: dict[str, Any] = {}
        if changes.status is not None:
            updates["status"] = changes.status.value
        if changes.priority is not None:
            updates["priority"] = changes.priority.value
        if changes.assigned_department is not None:
            updates["assignedDepartment"] = changes.assigned_department
        if changes.admin_notes is not None:
            updates["adminNotes"] = changes.admin_notes
        updates["lastUpdated"] = utc_now()
        await self._coll.document(issue_id).update(updates)

    async def set_duplicate(
        self, issue_id: str, duplicate_of_id: str | None, score: float | None
    ) -> None:
        await self._coll.document(issue_id).update(
            {
                "duplicateOfId": duplicate_of_id,
                "duplicateScore": score,
                "lastUpdated": utc_now(),
            }
        )

    async def set_ai_analysis(self, issue_id: str, analysis: dict[str, Any]) -> None:
        await self._coll.document(issue_id).update({"aiAnalysis": analysis})

    async def delete(self, issue_id: str) -> None:
        await self._coll.document(issue_id).delete()

    async def list_comments(self, issue_id: str) -> list[Comment]:
        comments = self._coll.document(issue_id).collection(SUBCOLLECTION_COMMENTS)
        return [
            comment_from_document(s.id, s.to_dict())
            async for s in comments.order_by("createdAt").stream()
        ]

    async def add_comment(
        self,
        issue_id: str,
        text: str,
        author: str,
        author_email: str,
        comment_type: CommentType,
    ) -> Comment:
        now = utc_now()
        comments = self._coll.document(issue_id).collection(SUBCOLLECTION_COMMENTS)
        ref = await comments.add(
            {
                "text": text,
                "author": author,
                "authorEmail": author_email,
                "type": comment_type.value,
                "createdAt": now,
            }
        )
        return Comment(
            id=ref.id,
            text=text,
            author=author,
            author_email=author_email,
            type=comment_type,
            created_at=now,
        )
