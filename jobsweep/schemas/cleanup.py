from pydantic import BaseModel, Field

from jobsweep.services.sweep_service import SweepSummary


class CurrentStatsOut(BaseModel):
    total_jobs: int = Field(0, alias="totalJobs")
    total_search_terms: int = Field(0, alias="totalSearchTerms")
    total_links: int = Field(0, alias="totalLinks")

    class Config:
        populate_by_name = True


class CleanupSummaryOut(BaseModel):
    success: bool = True
    deleted_expired_jobs: int = Field(0, alias="deletedExpiredJobs")
    reset_stale_search_terms: int = Field(0, alias="resetStaleSearchTerms")
    deleted_orphaned_terms: int = Field(0, alias="deletedOrphanedTerms")
    old_cache_deleted: int = Field(0, alias="oldCacheDeleted")
    current_stats: CurrentStatsOut = Field(default_factory=CurrentStatsOut, alias="currentStats")

    class Config:
        populate_by_name = True

    @classmethod
    def from_summary(cls, summary: SweepSummary) -> "CleanupSummaryOut":
        stats = summary.current_stats
        return cls(
            deleted_expired_jobs=summary.deleted_expired_jobs,
            reset_stale_search_terms=summary.reset_stale_search_terms,
            deleted_orphaned_terms=summary.deleted_orphaned_terms,
            old_cache_deleted=summary.old_cache_deleted,
            current_stats=CurrentStatsOut(
                total_jobs=stats.total_jobs,
                total_search_terms=stats.total_search_terms,
                total_links=stats.total_links,
            ),
        )


class ErrorOut(BaseModel):
    message: str
