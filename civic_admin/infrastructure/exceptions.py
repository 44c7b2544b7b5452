"""Infrastructure exceptions for document store operations.

Data store errors extend CivicAdminException so presentation can map them
to HTTP responses consistently. The exception handler decides between
LOAD_FAILED and ACTION_FAILED from the request method.
"""

from civic_admin.domain.exceptions import CivicAdminException


class DataStoreException(CivicAdminException):
    """Firestore answered with an error status or could not be reached."""

    def __init__(self, operation: str, reason: str, status_code: int | None = None) -> None:
        details: dict[str, object] = {"operation": operation, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            f"Data store {operation} failed",
            "DATA_STORE_ERROR",
            details,
        )


class DocumentNotFoundError(DataStoreException):
    """update() targeted a document that does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__("update", f"document not found: {path}", 404)
        self.path = path


class DocumentExistsError(DataStoreException):
    """create() returned 409 (document ID already exists)."""

    def __init__(self, path: str) -> None:
        super().__init__("create", f"document already exists: {path}", 409)
        self.path = path
