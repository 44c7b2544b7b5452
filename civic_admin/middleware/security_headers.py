"""Security headers middleware for the JSON API and landing page."""

from typing import Callable

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; style-src 'unsafe-inline'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

# Swagger UI loads its assets from a CDN and runs inline scripts.
DOCS_PATHS = ("/docs", "/redoc")


def SecurityHeadersMiddleware(app: Callable, headers: dict[str, str] | None = None) -> Callable:
    """Add headers the route did not set itself. Docs pages skip the CSP."""
    configured = [
        (name.lower().encode(), value.encode())
        for name, value in (headers or DEFAULT_HEADERS).items()
    ]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        skip_csp = scope.get("path", "").startswith(DOCS_PATHS)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                for name, value in configured:
                    if name in present or (skip_csp and name == b"content-security-policy"):
                        continue
                    current.append((name, value))
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
