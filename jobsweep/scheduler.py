"""APScheduler setup for the cleanup sweep."""
import logging

import redis
from apscheduler.jobstores.redis import RedisJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from jobsweep.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _redis_jobstore(redis_url: str) -> RedisJobStore:
    # RedisJobStore forwards keyword arguments to redis.Redis, which takes no URL.
    return RedisJobStore(connection_pool=redis.ConnectionPool.from_url(redis_url))


jobstores = {}
if settings.redis_url:
    jobstores["default"] = _redis_jobstore(settings.redis_url)

scheduler = AsyncIOScheduler(jobstores=jobstores)


def register_jobs() -> None:
    """Register the cleanup sweep. Called once at startup."""
    from jobsweep.tasks.cleanup_jobs import cleanup_jobs_task

    # All times in UTC. One sweep at a time: overlapping runs are not synchronized
    # with each other, so max_instances must stay at 1.
    scheduler.add_job(
        cleanup_jobs_task,
        CronTrigger(hour=settings.cleanup_cron_hour, minute=settings.cleanup_cron_minute),
        id="cleanup_jobs",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=3600,
    )

    logger.info(
        "Scheduler jobs registered: cleanup_jobs (%02d:%02d UTC)",
        settings.cleanup_cron_hour,
        settings.cleanup_cron_minute,
    )


def start_scheduler() -> None:
    register_jobs()
    scheduler.start()
    logger.info("Scheduler started")


def stop_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=True)
    logger.info("Scheduler stopped")
