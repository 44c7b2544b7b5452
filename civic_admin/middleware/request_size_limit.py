"""Request body size limit middleware.

Issue edits and notification sends are small JSON bodies; anything past
``max_bytes`` is refused with 413 before it reaches a route. A declared
Content-Length is checked up front; otherwise the body is buffered while
counting and replayed to the app.
"""

from typing import Callable

from civic_admin.middleware._asgi import header_value, send_json_error


async def _reject(send: Callable, max_bytes: int, received: int) -> None:
    await send_json_error(
        send,
        413,
        "PAYLOAD_TOO_LARGE",
        f"Request body must be at most {max_bytes} bytes",
        {"max_bytes": max_bytes, "content_length": received},
    )


def _replay(chunks: list[bytes]) -> Callable:
    pending = list(chunks)

    async def receive() -> dict:
        if pending:
            body = pending.pop(0)
            return {"type": "http.request", "body": body, "more_body": bool(pending)}
        return {"type": "http.request", "body": b"", "more_body": False}

    return receive


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = header_value(scope, "content-length")
        if declared is not None:
            try:
                length = int(declared)
            except ValueError:
                length = 0
            if length > max_bytes:
                await _reject(send, max_bytes, length)
                return
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away; let the app see the disconnect
                await app(scope, _replay(chunks), send)
                return
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _reject(send, max_bytes, total)
                return
            chunks.append(body)
            more_body = message.get("more_body", False)
        await app(scope, _replay(chunks), send)

    return asgi_app
