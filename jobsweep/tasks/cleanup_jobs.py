"""Scheduled job cache cleanup.

Also runnable once from the shell: ``python -m jobsweep.tasks.cleanup_jobs``.
"""
import asyncio
import logging
from typing import Optional

from jobsweep.config import get_settings
from jobsweep.services.sweep_service import SweepOutcome, run_sweep
from jobsweep.store import SweepStore
from jobsweep.tasks.db import get_task_session

logger = logging.getLogger(__name__)


async def cleanup_jobs_task() -> Optional[SweepOutcome]:
    """Runs daily (see scheduler). Returns the outcome, or None if the session could not be opened."""
    settings = get_settings()

    try:
        async with get_task_session() as db:
            outcome = await run_sweep(
                SweepStore(db, chunk_size=settings.orphan_batch_size),
                decay_after_days=settings.decay_after_days,
                orphan_after_days=settings.orphan_after_days,
            )
    except Exception as e:
        logger.error(f"Cleanup task failed: {e}", exc_info=True)
        return None

    if not outcome.ok:
        logger.error(f"Cleanup task aborted: {outcome.error}")
    return outcome


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(cleanup_jobs_task())
