"""Raw ASGI middleware for the admin API.

Added in civic_admin.main; the last one added runs outermost.
"""

from civic_admin.middleware.correlation_id import CorrelationIDMiddleware
from civic_admin.middleware.request_id import RequestIDMiddleware
from civic_admin.middleware.request_size_limit import RequestSizeLimitMiddleware
from civic_admin.middleware.security_headers import SecurityHeadersMiddleware
from civic_admin.middleware.timeout import TimeoutMiddleware

__all__ = [
    "CorrelationIDMiddleware",
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
