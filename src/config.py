# config.py
# Runtime settings, read from the environment.

import logging
import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    rate_limit: str = "100/minute"
    share_url: str = "https://example.com/2048"
    max_sessions: int = 1000
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Builds Settings from SLIDE2048_* environment variables.
    Raises:
        ValueError: If SLIDE2048_MAX_SESSIONS is not a positive integer.
    """
    max_sessions = int(os.getenv("SLIDE2048_MAX_SESSIONS", str(Settings.max_sessions)))
    if max_sessions < 1:
        raise ValueError(f"SLIDE2048_MAX_SESSIONS must be at least 1, got {max_sessions}.")

    return Settings(
        rate_limit=os.getenv("SLIDE2048_RATE_LIMIT", Settings.rate_limit),
        share_url=os.getenv("SLIDE2048_SHARE_URL", Settings.share_url),
        max_sessions=max_sessions,
        log_level=os.getenv("SLIDE2048_LOG_LEVEL", Settings.log_level).upper(),
        host=os.getenv("SLIDE2048_HOST", Settings.host),
        port=int(os.getenv("SLIDE2048_PORT", str(Settings.port))),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
