"""Correlation ID middleware.

Uses the client's X-Correlation-ID, else the request id, else a new UUID.
Must run inside RequestIDMiddleware to reuse its id.
"""

import uuid
from typing import Callable

from civic_admin.middleware._asgi import header_value, with_response_header


def CorrelationIDMiddleware(app: Callable, header_name: str = "X-Correlation-ID") -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        state = scope.setdefault("state", {})
        correlation_id = (
            header_value(scope, header_name) or state.get("request_id") or str(uuid.uuid4())
        )
        state["correlation_id"] = correlation_id
        await app(scope, receive, with_response_header(send, header_name, correlation_id))

    return asgi_app
