"""Job cache cleanup sweep.

Runs the reclamation stages in order on one store session:

1. delete expired postings (fatal on failure)
2. decay popularity of stale search terms
3. delete orphaned search terms
4. count current totals
5. delete expired rows from the legacy job_search_cache table

Only stage 1 can abort the sweep. The others log and report 0.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional

from jobsweep.services.sweep_stages import (
    DECAY_AFTER_DAYS,
    ORPHAN_AFTER_DAYS,
    SweepStats,
    aggregate_stats,
    decay_stale_search_terms,
    reap_expired_postings,
    reclaim_orphaned_terms,
    sweep_legacy_cache,
)
from jobsweep.store import SweepStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepSummary:
    deleted_expired_jobs: int = 0
    reset_stale_search_terms: int = 0
    deleted_orphaned_terms: int = 0
    old_cache_deleted: int = 0
    current_stats: SweepStats = field(default_factory=SweepStats)


@dataclass(frozen=True)
class SweepOutcome:
    summary: Optional[SweepSummary] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_sweep(
    store: SweepStore,
    now: Optional[datetime] = None,
    decay_after_days: int = DECAY_AFTER_DAYS,
    orphan_after_days: int = ORPHAN_AFTER_DAYS,
) -> SweepOutcome:
    """Run one full sweep. ``now`` is fixed for every stage of the run."""
    now = now or datetime.now(timezone.utc)
    logger.info("[Cleanup] Starting job cleanup at %s", now.isoformat())

    expired = await reap_expired_postings(store, now)
    if not expired.ok:
        logger.error("[Cleanup] Aborting sweep, %s failed: %s", expired.stage, expired.error)
        return SweepOutcome(error=expired.error)

    decayed = await decay_stale_search_terms(store, now, days=decay_after_days)
    orphaned = await reclaim_orphaned_terms(store, now, days=orphan_after_days)
    stats = await aggregate_stats(store)
    legacy = await sweep_legacy_cache(store, now)

    for result in (decayed, orphaned, legacy):
        if not result.ok:
            logger.warning("[Cleanup] %s reported 0 after failure: %s", result.stage, result.error)

    summary = SweepSummary(
        deleted_expired_jobs=expired.count,
        reset_stale_search_terms=decayed.count,
        deleted_orphaned_terms=orphaned.count,
        old_cache_deleted=legacy.count,
        current_stats=stats,
    )
    logger.info("[Cleanup] Complete: %s", asdict(summary))
    return SweepOutcome(summary=summary)
