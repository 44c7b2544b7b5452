"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Domain error codes map to
HTTP statuses; data store failures become LOAD_FAILED on reads and
ACTION_FAILED on writes so the portal can tell the two apart.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from civic_admin.core.config import get_settings
from civic_admin.domain.exceptions import CivicAdminException
from civic_admin.infrastructure.exceptions import DataStoreException

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "TEMPLATE_NOT_FOUND": 404,
    "DEPARTMENT_ALREADY_EXISTS": 409,
    "EXTERNAL_SERVICE_ERROR": 502,
    "SERVICE_UNAVAILABLE": 503,
}

_READ_METHODS = frozenset({"GET", "HEAD"})


def _civic_admin_exception_handler(request: Request, exc: CivicAdminException) -> JSONResponse:
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _data_store_exception_handler(request: Request, exc: DataStoreException) -> JSONResponse:
    """502 with LOAD_FAILED for reads and ACTION_FAILED for writes."""
    logger.error(
        "Data store error on %s %s: %s",
        request.method,
        request.url.path,
        exc.details.get("reason"),
    )
    is_read = request.method.upper() in _READ_METHODS
    content: dict[str, Any] = {
        "error": "LOAD_FAILED" if is_read else "ACTION_FAILED",
        "message": "Could not load data" if is_read else "Could not complete the action",
        "details": {"operation": exc.details.get("operation")},
    }
    if get_settings().debug:
        content["details"]["reason"] = exc.details.get("reason")
    return JSONResponse(status_code=502, content=content)


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers are looked up along the exception's MRO, so DataStoreException
    gets its own handler ahead of the CivicAdminException one.
    """
    app.add_exception_handler(DataStoreException, _data_store_exception_handler)
    app.add_exception_handler(CivicAdminException, _civic_admin_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
