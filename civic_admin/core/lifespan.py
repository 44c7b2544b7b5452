"""Application lifespan: startup and shutdown.

Wiring only: shared outbound HTTP client, Firestore client and the
auto-assign worker. No business logic here.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from civic_admin.core.auto_assign_worker import run_auto_assign_loop
from civic_admin.core.config import get_settings
from civic_admin.core.container import build_services
from civic_admin.infrastructure.firebase.client import (
    close_firebase,
    get_firestore_client,
    init_firebase,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: outbound HTTP client, Firestore, auto-assign worker (when
    enabled and Firestore is configured). Shutdown in reverse order.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.http_client = httpx.AsyncClient(timeout=settings.outbound_http_timeout_seconds)
    app.state.firestore_ready = init_firebase()
    app.state.auto_assign_task = None

    client = get_firestore_client()
    if settings.auto_assign_enabled and client is not None:
        services = build_services(client, app.state.http_client, settings)
        app.state.auto_assign_task = asyncio.create_task(
            run_auto_assign_loop(services.auto_assign, settings.auto_assign_poll_seconds)
        )
    elif settings.auto_assign_enabled:
        logger.warning("Auto-assign worker not started: Firestore is not configured")

    yield

    # ---- Shutdown ----
    task = app.state.auto_assign_task
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        app.state.auto_assign_task = None
        logger.info("Auto-assign worker stopped")

    await app.state.http_client.aclose()
    logger.info("Outbound HTTP client closed")

    await close_firebase()
