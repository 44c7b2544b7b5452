"""Tests for document to entity mapping of loosely-typed documents."""

from datetime import UTC, datetime

from civic_admin.domain.enums import (
    AutomationTrigger,
    IssuePriority,
    IssueStatus,
    UserRole,
    UserSource,
)
from civic_admin.infrastructure.firebase.repositories._mapping import (
    as_enum,
    automation_rule_from_document,
    department_from_document,
    issue_from_document,
    user_from_document,
)


class TestIssueFromDocument:
    def test_full_document(self) -> None:
        issue = issue_from_document(
            "i1",
            {
                "title": "Pothole",
                "status": "In Progress",
                "priority": "Critical",
                "category": "Roads",
                "location": {"latitude": 12.9, "longitude": 77.6, "address": "MG Road"},
                "reportedBy": "a@b.com",
                "reportedById": "u1",
                "assignedDepartment": "Public Works",
                "imageUri": "https://img/1.jpg",
                "reportedAt": 1735689600000,
                "duplicateScore": 0.8,
            },
        )
        assert issue.status == IssueStatus.IN_PROGRESS
        assert issue.priority == IssuePriority.CRITICAL
        assert issue.address == "MG Road"
        assert issue.location.latitude == 12.9
        assert issue.image_url == "https://img/1.jpg"
        assert issue.reported_at == datetime(2025, 1, 1, tzinfo=UTC)
        assert issue.duplicate_score == 0.8

    def test_missing_and_bad_fields_use_defaults(self) -> None:
        issue = issue_from_document(
            "i2", {"status": "Closed", "priority": 3, "location": {"latitude": "x"}, "title": None}
        )
        assert issue.title == ""
        assert issue.status == IssueStatus.OPEN
        assert issue.priority == IssuePriority.MEDIUM
        assert issue.location is None
        assert issue.reported_by_id is None
        assert not issue.is_assigned

    def test_iso_string_timestamp(self) -> None:
        issue = issue_from_document("i3", {"reportedAt": "2025-02-01T08:00:00Z"})
        assert issue.reported_at == datetime(2025, 2, 1, 8, tzinfo=UTC)


def test_department_keywords_lowercased_and_active_default() -> None:
    department = department_from_document("d1", {"name": "Roads", "keywords": ["Pothole", 5]})
    assert department.keywords == ["pothole"]
    assert department.active


def test_user_falls_back_to_name_field() -> None:
    user = user_from_document("u1", {"name": "Asha", "role": "superuser", "source": "web_portal"})
    assert user.display_name == "Asha"
    assert user.role == UserRole.CITIZEN
    assert user.source == UserSource.WEB_PORTAL
    assert user.push_token is None


def test_automation_rule_unknown_trigger_skipped() -> None:
    assert automation_rule_from_document("r1", {"trigger": "issue_deleted"}) is None
    rule = automation_rule_from_document("r2", {"trigger": "comment_added", "enabled": True})
    assert rule.trigger == AutomationTrigger.COMMENT_ADDED
    assert rule.enabled


def test_as_enum_passthrough_and_default() -> None:
    assert as_enum(UserRole, UserRole.ADMIN, UserRole.CITIZEN) == UserRole.ADMIN
    assert as_enum(UserRole, None, UserRole.CITIZEN) == UserRole.CITIZEN
