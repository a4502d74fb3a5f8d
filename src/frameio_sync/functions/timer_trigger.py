"""Timer trigger blueprint — scheduled sweep through project pages."""

import logging

import azure.functions as func

from frameio_sync.config import load_config
from frameio_sync.orchestration.connector import connector_from_config
from frameio_sync.sync.continuation_store import continuation_store_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.timer_trigger(
    schedule="0 */15 * * * *",
    arg_name="timer",
    run_on_startup=False,
)
async def project_sweep(timer: func.TimerRequest) -> None:
    """Scheduled trigger that syncs one page of projects per firing.

    Runs every 15 minutes. Reads the stored continuation, fetches the next
    page of projects for the configured teams (all visible teams when none
    are configured), then stores the advanced continuation, or clears it once
    every team is exhausted so the next firing starts again from page 1.
    """
    logger.info("[project_sweep] timer trigger fired")

    try:
        if timer.past_due:
            logger.warning("[project_sweep] timer trigger is past due")

        config = load_config()
        store = continuation_store_from_config(config)
        continuation = await store.load()

        async with connector_from_config(config) as connector:
            sync_result = await connector.sync_team_projects(
                list(config.sweep_team_ids), continuation
            )
        logger.info(
            "[project_sweep] synced page; page:%d;project_count:%d",
            continuation.page if continuation else 1,
            len(sync_result.result),
        )

        if sync_result.continuation is None:
            await store.clear()
            logger.info("[project_sweep] paging complete")
        else:
            await store.save(sync_result.continuation)

    except Exception:
        logger.exception("[project_sweep] timer trigger failed")
        raise
