"""Request ID middleware.

Forwards a well-formed client X-Request-ID or mints a new one, stores it on
``scope["state"]`` for logging and echoes it on the response. Client values
are limited to a safe character set so they can go into log lines.
"""

import re
import uuid
from typing import Callable

from civic_admin.middleware._asgi import header_value, with_response_header

REQUEST_ID_MAX_LENGTH = 64
_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _sanitize_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if _SAFE_ID.match(candidate):
        return candidate
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = _sanitize_request_id(header_value(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        await app(scope, receive, with_response_header(send, header_name, request_id))

    return asgi_app
