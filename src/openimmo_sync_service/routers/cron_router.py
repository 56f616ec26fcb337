"""
Trigger endpoint for scheduled (cron) and manual sync runs.
"""

import asyncio
from typing import Set

from fastapi import APIRouter

from openimmo_sync_service.config import settings
from openimmo_sync_service.schemas.common import SyncTriggerResponse
from openimmo_sync_service.services.sync_pipeline import run_scheduled_sync
from openimmo_sync_service.utils.logging_config import logger

router = APIRouter(prefix="/api", tags=["Sync"])

TIMEOUT_MESSAGE = "Processing timed out, execution will continue but response returned"
BACKGROUND_NOTE = "Processing may still be running in the background"

# Runs that outlived their trigger request; referenced until they finish
_background_runs: Set[asyncio.Task] = set()


def _track_background_run(task: asyncio.Task) -> None:
    _background_runs.add(task)

    def _finished(done: asyncio.Task) -> None:
        _background_runs.discard(done)
        if done.cancelled():
            return
        if done.exception() is not None:
            logger.error(f"Background sync run failed: {done.exception()}")
        else:
            logger.info("Background sync run completed")

    task.add_done_callback(_finished)


@router.get("/cron", response_model=SyncTriggerResponse)
async def trigger_sync() -> SyncTriggerResponse:
    """
    Run one feed synchronization.

    Always answers 200 so the scheduler never retries on its own. When the run
    exceeds the time budget the response is returned but the run is not
    cancelled; it keeps going in the background until it finishes.
    """
    logger.info("Starting scheduled import via cron job")
    run = asyncio.create_task(run_scheduled_sync())

    try:
        report = await asyncio.wait_for(
            asyncio.shield(run), timeout=settings.CRON_TIMEOUT_SECONDS
        )
    except asyncio.TimeoutError:
        _track_background_run(run)
        logger.error(f"Error in cron job: {TIMEOUT_MESSAGE}")
        return SyncTriggerResponse(success=False, error=TIMEOUT_MESSAGE, note=BACKGROUND_NOTE)
    except Exception as e:
        logger.error(f"Error in cron job: {e}", exc_info=True)
        return SyncTriggerResponse(success=False, error=str(e), note=BACKGROUND_NOTE)

    logger.info("Scheduled import completed successfully")
    return SyncTriggerResponse(success=True, message="Import completed", report=report)
