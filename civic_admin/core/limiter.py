"""Rate limiter instance for SlowAPI.

Shared by main (app.state.limiter) and the route modules. Limit strings
live here so every write route uses the same budget.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "120/minute"
NOTIFICATION_SEND_LIMIT = "20/minute"
BULK_JOB_LIMIT = "10/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_send = limiter.limit(NOTIFICATION_SEND_LIMIT)
limit_bulk = limiter.limit(BULK_JOB_LIMIT)
