"""Domain exceptions for the civic admin portal.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CivicAdminException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CivicAdminException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CivicAdminException):
    """Raised when the bearer token is missing, invalid or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CivicAdminException):
    """Raised when the caller's role does not allow the operation."""

    def __init__(
        self,
        role: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional role, action, and message.

        Args:
            role: Role of the caller (e.g. 'moderator').
            action: Action that was attempted (e.g. 'delete issue').
            message: Human-readable message; default used when role/action omitted.
        """
        if role and action:
            message = f"Permission denied: role '{role}' cannot {action}"
        details: dict[str, Any] = {}
        if role:
            details["role"] = role
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(CivicAdminException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'issue', 'department').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DepartmentAlreadyExistsException(CivicAdminException):
    """Raised when creating or renaming a department to a name already in use."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Department '{name}' already exists",
            "DEPARTMENT_ALREADY_EXISTS",
            {"name": name},
        )


class TemplateNotFoundException(CivicAdminException):
    """Raised when an automation rule references a template that does not exist."""

    def __init__(self, template_id: str) -> None:
        super().__init__(
            f"Notification template not found: {template_id}",
            "TEMPLATE_NOT_FOUND",
            {"template_id": template_id},
        )


class ExternalServiceException(CivicAdminException):
    """Raised when a third-party API (push gateway, image analysis) fails."""

    def __init__(self, service: str, reason: str) -> None:
        super().__init__(
            f"{service} request failed",
            "EXTERNAL_SERVICE_ERROR",
            {"service": service, "reason": reason},
        )


class ImageAnalysisNotConfiguredException(CivicAdminException):
    """Raised when image analysis is requested without an API key."""

    def __init__(self) -> None:
        super().__init__(
            message="Image analysis is not configured (set GEMINI_API_KEY).",
            error_code="SERVICE_UNAVAILABLE",
        )
