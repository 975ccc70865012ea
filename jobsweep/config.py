from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    sentry_dsn: str = ""
    environment: str = ""
    debug: bool = False
    redis_url: str = ""

    # Scheduled sweep
    scheduler_enabled: bool = True
    cleanup_cron_hour: int = 3
    cleanup_cron_minute: int = 0

    # Sweep thresholds
    decay_after_days: int = 30
    orphan_after_days: int = 60
    orphan_batch_size: int = 500

    rate_limit_enabled: bool = True
    cleanup_rate_limit: str = "10/minute"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
