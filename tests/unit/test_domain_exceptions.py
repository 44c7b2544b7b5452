"""Tests for domain exception codes and details."""

from civic_admin.domain.exceptions import (
    AuthorizationException,
    CivicAdminException,
    DepartmentAlreadyExistsException,
    ExternalServiceException,
    ResourceNotFoundException,
    ValidationException,
)
from civic_admin.infrastructure.exceptions import DataStoreException, DocumentNotFoundError


def test_base_defaults_error_code_to_class_name() -> None:
    exc = CivicAdminException("boom")
    assert exc.error_code == "CivicAdminException"
    assert exc.to_dict() == {"error": "CivicAdminException", "message": "boom", "details": {}}


def test_validation_field_detail() -> None:
    exc = ValidationException("bad", field="days")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "days"}
    assert ValidationException("bad").details == {}


def test_authorization_message_from_role_and_action() -> None:
    exc = AuthorizationException("moderator", "delete issue")
    assert exc.message == "Permission denied: role 'moderator' cannot delete issue"
    assert exc.details == {"role": "moderator", "action": "delete issue"}


def test_not_found_and_conflict() -> None:
    assert ResourceNotFoundException("issue", "x").details == {
        "resource_type": "issue",
        "resource_id": "x",
    }
    assert DepartmentAlreadyExistsException("Roads").error_code == "DEPARTMENT_ALREADY_EXISTS"


def test_external_service_reason() -> None:
    exc = ExternalServiceException("gemini", "HTTP 500")
    assert exc.message == "gemini request failed"
    assert exc.details["reason"] == "HTTP 500"


def test_data_store_errors_are_civic_admin_exceptions() -> None:
    exc = DocumentNotFoundError("civicIssues/x")
    assert isinstance(exc, DataStoreException)
    assert isinstance(exc, CivicAdminException)
    assert exc.details["status_code"] == 404
