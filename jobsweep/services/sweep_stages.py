"""Reclamation stages of the job cache cleanup sweep.

Each stage takes the store session and the sweep's fixed ``now`` and returns a
StageResult instead of raising, so the orchestrator decides which failures stop
the sweep.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jobsweep.exceptions import StoreError
from jobsweep.models import JobSearchCache, JobSearchLink, Posting, SearchTerm
from jobsweep.store import SweepStore

logger = logging.getLogger(__name__)

DECAY_AFTER_DAYS = 30
ORPHAN_AFTER_DAYS = 60

# SQLSTATE for undefined_table on PostgreSQL.
UNDEFINED_TABLE = "42P01"


@dataclass(frozen=True)
class StageResult:
    stage: str
    count: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, stage: str, count: int) -> "StageResult":
        return cls(stage=stage, count=count)

    @classmethod
    def failure(cls, stage: str, error: str) -> "StageResult":
        return cls(stage=stage, count=0, error=error)


@dataclass(frozen=True)
class SweepStats:
    total_jobs: int = 0
    total_search_terms: int = 0
    total_links: int = 0


async def reap_expired_postings(store: SweepStore, now: datetime) -> StageResult:
    """Delete postings that expired before ``now``. Their links go with them (FK cascade)."""
    try:
        deleted = await store.delete_older_than(Posting.expires_at, now)
    except StoreError as e:
        logger.error("[Cleanup] Error deleting expired jobs: %s", e, exc_info=e.cause)
        return StageResult.failure("expired_jobs", str(e))
    logger.info("[Cleanup] Deleted %d expired jobs", deleted)
    return StageResult.success("expired_jobs", deleted)


async def decay_stale_search_terms(
    store: SweepStore, now: datetime, days: int = DECAY_AFTER_DAYS
) -> StageResult:
    """Reset search_count to 1 for terms nobody searched in ``days`` days."""
    cutoff = now - timedelta(days=days)
    try:
        reset = await store.update_older_than(
            SearchTerm.last_searched_at,
            cutoff,
            SearchTerm.search_count,
            1,
            {"search_count": 1},
        )
    except StoreError as e:
        logger.error("[Cleanup] Error resetting stale search counts: %s", e)
        return StageResult.failure("stale_search_terms", str(e))
    logger.info("[Cleanup] Reset search count for %d stale search terms", reset)
    return StageResult.success("stale_search_terms", reset)


async def reclaim_orphaned_terms(
    store: SweepStore, now: datetime, days: int = ORPHAN_AFTER_DAYS
) -> StageResult:
    """Delete search terms older than ``days`` days that no longer link to any posting.

    Must run after reap_expired_postings in the same sweep: links removed by the
    posting cascade are what turn a term into an orphan. Staleness alone is not
    enough; a term with a single surviving link is kept.
    """
    cutoff = now - timedelta(days=days)
    try:
        rows = await store.select_older_than(
            (SearchTerm.id, SearchTerm.canonical_term), SearchTerm.last_searched_at, cutoff
        )
        if not rows:
            logger.info("[Cleanup] Deleted 0 orphaned search terms")
            return StageResult.success("orphaned_terms", 0)

        candidate_ids = [row.id for row in rows]
        link_counts = await store.count_grouped(JobSearchLink.search_term_id, candidate_ids)
        orphans = [row for row in rows if not link_counts.get(row.id)]
        for row in orphans:
            logger.debug("[Cleanup] Orphaned search term: %s", row.canonical_term)

        deleted = await store.delete_where_in(SearchTerm.id, [row.id for row in orphans])
    except StoreError as e:
        logger.error("[Cleanup] Error deleting orphaned search terms: %s", e)
        return StageResult.failure("orphaned_terms", str(e))

    logger.info(
        "[Cleanup] Deleted %d orphaned search terms (%d stale candidates)", deleted, len(rows)
    )
    return StageResult.success("orphaned_terms", deleted)


async def aggregate_stats(store: SweepStore) -> SweepStats:
    """Read-only totals after the mutating stages. A failed count reports 0."""
    totals = {}
    for name, model in (
        ("total_jobs", Posting),
        ("total_search_terms", SearchTerm),
        ("total_links", JobSearchLink),
    ):
        try:
            totals[name] = await store.count_all(model)
        except StoreError as e:
            logger.warning("[Cleanup] Could not count %s: %s", model.__tablename__, e)
            totals[name] = 0
    return SweepStats(**totals)


def _is_missing_table(error: StoreError, table: str) -> bool:
    orig = getattr(error.cause, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNDEFINED_TABLE
    text = str(orig if orig is not None else error).lower()
    return f"no such table: {table}" in text or f'relation "{table}" does not exist' in text


async def sweep_legacy_cache(store: SweepStore, now: datetime) -> StageResult:
    """Delete expired rows from the old job_search_cache table, if it is still deployed.

    Never fails the sweep. A missing table is expected once the migration is
    finished; anything else is logged as a warning.
    """
    try:
        deleted = await store.delete_older_than(JobSearchCache.expires_at, now)
    except StoreError as e:
        if _is_missing_table(e, JobSearchCache.__tablename__):
            logger.debug("[Cleanup] job_search_cache not present, skipping")
            return StageResult.success("old_cache", 0)
        logger.warning("[Cleanup] Error cleaning old job_search_cache: %s", e)
        return StageResult.failure("old_cache", str(e))
    if deleted:
        logger.info("[Cleanup] Also deleted %d entries from old job_search_cache", deleted)
    return StageResult.success("old_cache", deleted)
