"""Document <-> entity mapping shared by the Firestore repositories.

Documents are written by several clients, so every reader tolerates
missing fields, wrong types and unknown enum values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from civic_admin.domain.entities import (
    AppUser,
    AutoAssignmentRule,
    AutomationRule,
    Comment,
    Department,
    Issue,
    IssueLocation,
    NotificationLog,
    NotificationTemplate,
)
from civic_admin.domain.enums import (
    AutomationTrigger,
    CommentType,
    IssuePriority,
    IssueStatus,
    NotificationPriority,
    NotificationStatus,
    NotificationTarget,
    NotificationType,
    TemplateType,
    UserRole,
    UserSource,
    UserStatus,
)
from civic_admin.shared.utils.datetime import to_datetime

E = TypeVar("E", bound=Enum)


def as_enum(enum_cls: type[E], value: Any, default: E) -> E:
    """Coerce a stored string to ``enum_cls``; unknown values give ``default``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def _float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _location(data: dict[str, Any]) -> IssueLocation | None:
    raw = data.get("location")
    if not isinstance(raw, dict):
        return None
    lat = _float(raw.get("latitude"))
    lon = _float(raw.get("longitude"))
    if lat is None or lon is None:
        return None
    return IssueLocation(latitude=lat, longitude=lon)


def _address(data: dict[str, Any]) -> str:
    address = _str(data.get("address"))
    if address:
        return address
    location = data.get("location")
    if isinstance(location, dict):
        return _str(location.get("address"))
    return ""


def issue_from_document(doc_id: str, data: dict[str, Any]) -> Issue:
    analysis = data.get("aiAnalysis")
    return Issue(
        id=doc_id,
        title=_str(data.get("title")),
        description=_str(data.get("description")),
        status=as_enum(IssueStatus, data.get("status"), IssueStatus.OPEN),
        priority=as_enum(IssuePriority, data.get("priority"), IssuePriority.MEDIUM),
        category=_str(data.get("category")),
        address=_address(data),
        location=_location(data),
        reported_by=_str(data.get("reportedBy")),
        reported_by_id=_str(data.get("reportedById")) or None,
        assigned_department=_str(data.get("assignedDepartment")),
        admin_notes=_str(data.get("adminNotes")),
        image_url=_str(data.get("imageUrl")) or _str(data.get("imageUri")) or None,
        reported_at=to_datetime(data.get("reportedAt")),
        last_updated=to_datetime(data.get("lastUpdated")),
        duplicate_of_id=_str(data.get("duplicateOfId")) or None,
        duplicate_score=_float(data.get("duplicateScore")),
        ai_analysis=analysis if isinstance(analysis, dict) else None,
    )


def comment_from_document(doc_id: str, data: dict[str, Any]) -> Comment:
    return Comment(
        id=doc_id,
        text=_str(data.get("text")),
        author=_str(data.get("author")) or "Unknown",
        author_email=_str(data.get("authorEmail")),
        type=as_enum(CommentType, data.get("type"), CommentType.COMMENT),
        created_at=to_datetime(data.get("createdAt")),
    )


def department_from_document(doc_id: str, data: dict[str, Any]) -> Department:
    return Department(
        id=doc_id,
        name=_str(data.get("name")),
        description=_str(data.get("description")),
        head=_str(data.get("head")),
        email=_str(data.get("email")),
        phone=_str(data.get("phone")),
        working_hours=_str(data.get("workingHours")),
        keywords=[k.lower() for k in _str_list(data.get("keywords"))],
        categories=_str_list(data.get("categories")),
        active=data.get("active") is not False,
        issues_assigned=_int(data.get("issuesAssigned")),
        issues_resolved=_int(data.get("issuesResolved")),
    )


def assignment_rule_from_document(doc_id: str, data: dict[str, Any]) -> AutoAssignmentRule:
    return AutoAssignmentRule(
        id=doc_id,
        category=_str(data.get("category")),
        department=_str(data.get("department")),
        priority=as_enum(IssuePriority, data.get("priority"), IssuePriority.MEDIUM),
        enabled=data.get("enabled") is not False,
    )


def user_from_document(doc_id: str, data: dict[str, Any]) -> AppUser:
    return AppUser(
        id=doc_id,
        email=_str(data.get("email")),
        display_name=_str(data.get("displayName")) or _str(data.get("name")),
        phone=_str(data.get("phone")),
        role=as_enum(UserRole, data.get("role"), UserRole.CITIZEN),
        status=as_enum(UserStatus, data.get("status"), UserStatus.ACTIVE),
        source=as_enum(UserSource, data.get("source"), UserSource.MOBILE_APP),
        department=_str(data.get("department")),
        push_token=_str(data.get("pushToken")) or None,
        notifications_enabled=data.get("notificationsEnabled") is not False,
        created_at=to_datetime(data.get("createdAt")),
        last_active=to_datetime(data.get("lastActive")),
    )


def notification_log_from_document(doc_id: str, data: dict[str, Any]) -> NotificationLog:
    return NotificationLog(
        id=doc_id,
        title=_str(data.get("title")),
        body=_str(data.get("body")),
        type=as_enum(NotificationType, data.get("type"), NotificationType.MANUAL),
        target=as_enum(NotificationTarget, data.get("target"), NotificationTarget.ALL),
        priority=as_enum(
            NotificationPriority, data.get("priority"), NotificationPriority.NORMAL
        ),
        status=as_enum(NotificationStatus, data.get("status"), NotificationStatus.SENT),
        sent_by=_str(data.get("sentBy")),
        sent_at=to_datetime(data.get("sentAt")),
        recipient_count=_int(data.get("recipientCount")),
        success_count=_int(data.get("successCount")),
        failure_count=_int(data.get("failureCount")),
        related_issue_id=_str(data.get("relatedIssueId")) or None,
    )


def template_from_document(doc_id: str, data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        id=doc_id,
        name=_str(data.get("name")),
        title=_str(data.get("title")),
        body=_str(data.get("body")),
        type=as_enum(TemplateType, data.get("type"), TemplateType.INFO),
        created_at=to_datetime(data.get("createdAt")),
    )


def automation_rule_from_document(doc_id: str, data: dict[str, Any]) -> AutomationRule | None:
    """Rules with an unknown trigger are skipped (None)."""
    try:
        trigger = AutomationTrigger(data.get("trigger"))
    except ValueError:
        return None
    return AutomationRule(
        id=doc_id,
        trigger=trigger,
        condition=_str(data.get("condition")),
        template_id=_str(data.get("templateId")) or None,
        description=_str(data.get("description")),
        enabled=data.get("enabled") is True,
        times_triggered=_int(data.get("timesTriggered")),
        last_triggered=to_datetime(data.get("lastTriggered")),
        created_at=to_datetime(data.get("createdAt")),
    )
