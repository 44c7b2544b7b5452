"""Route every unassigned issue once (same as POST /assignment-rules/run).

Usage:
    uv run python -m scripts.run_auto_assign
Requires FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH.
"""

import asyncio
import sys

import httpx

from civic_admin.core.config import get_settings
from civic_admin.core.container import build_services
from civic_admin.infrastructure.firebase.client import (
    close_firebase,
    get_firestore_client,
    init_firebase,
)
from civic_admin.shared.logging import setup_logging


async def main() -> None:
    setup_logging()
    settings = get_settings()
    if not init_firebase():
        print("Firestore is not configured", file=sys.stderr)
        sys.exit(1)
    async with httpx.AsyncClient(timeout=settings.outbound_http_timeout_seconds) as http:
        services = build_services(get_firestore_client(), http, settings)
        result = await services.auto_assign.run_bulk_auto_assign()
    await close_firebase()
    print(f"Done. Assigned {result.assigned} of {result.scanned} unassigned issue(s)")


if __name__ == "__main__":
    asyncio.run(main())
