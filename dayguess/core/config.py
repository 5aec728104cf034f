import logging
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # Calendar
    TIMEZONE: Optional[str] = None  # IANA name; None = host local zone

    # Persistence
    DATABASE_URL: Optional[str] = None  # e.g. sqlite:///dayguess.db; None = in-memory

    # Dataset
    POOL_PATH: Optional[str] = None  # None = bundled days_pool.json

    # Sharing
    SHARE_URL: str = "https://bull-jazz-day.vercel.app"

    # HTTP
    CORS_ORIGINS: str = "http://localhost:3000"  # comma-separated

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj=None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("dayguess")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    database_url = getattr(cfg, "DATABASE_URL", None)
    if database_url:
        try:
            make_url(database_url)
        except ArgumentError:
            problems.append("DATABASE_URL is not a valid SQLAlchemy URL")
    elif str(getattr(cfg, "ENV", "")).lower() == "production":
        problems.append("DATABASE_URL is required in production (memory storage is lost on restart)")

    tz_name = getattr(cfg, "TIMEZONE", None)
    if tz_name:
        try:
            ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            problems.append(f"TIMEZONE {tz_name!r} is not a known IANA zone")

    if problems:
        message = "Invalid configuration: " + "; ".join(problems)
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)
        return False

    return True
