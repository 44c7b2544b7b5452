"""Seed the default departments and auto-assignment rules.

Usage:
    uv run python -m scripts.seed_defaults
Existing department names and rule categories are left untouched.
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


async def main() -> None:
    settings = get_settings()
    if not init_firebase():
        print("Firestore is not configured", file=sys.stderr)
        sys.exit(1)
    async with httpx.AsyncClient(timeout=settings.outbound_http_timeout_seconds) as http:
        services = build_services(get_firestore_client(), http, settings)
        departments = await services.departments.seed_default_departments()
        rules = await services.departments.seed_default_rules()
    await close_firebase()

    print(f"Departments created: {', '.join(departments.created) or 'none'}")
    print(f"Departments already present: {', '.join(departments.skipped) or 'none'}")
    print(f"Rules created: {', '.join(rules.created) or 'none'}")
    print(f"Rules already present: {', '.join(rules.skipped) or 'none'}")


if __name__ == "__main__":
    asyncio.run(main())
