"""Background loop that processes newly reported issues."""

import asyncio
import logging

from civic_admin.application.use_cases.auto_assign import AutoAssignService

logger = logging.getLogger(__name__)


async def run_auto_assign_loop(service: AutoAssignService, interval_seconds: float) -> None:
    """Call process_new_issues every ``interval_seconds`` until cancelled.

    A failing pass is logged and the loop keeps going.
    """
    logger.info("Auto-assign worker started (every %ss)", interval_seconds)
    while True:
        try:
            processed = await service.process_new_issues()
            if processed:
                logger.info("Auto-assign worker processed %d new issue(s)", processed)
        except Exception:
            logger.exception("Auto-assign pass failed")
        await asyncio.sleep(interval_seconds)
