import logging
import os
from dataclasses import dataclass

APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class LoaderSettings:
    port: int
    timeout: float
    user_agent: str
    cache_count_limit: int
    cache_total_cost_limit: int
    scale: float
    log_level: str

    @classmethod
    def from_env(cls) -> "LoaderSettings":
        return cls(
            port=int(os.getenv("PORT", "5600")),
            timeout=float(os.getenv("FETCH_TIMEOUT", "10.0")),
            user_agent=os.getenv("USER_AGENT", f"cached-image/{APP_VERSION}"),
            cache_count_limit=int(os.getenv("CACHE_COUNT_LIMIT", "0")),
            cache_total_cost_limit=int(os.getenv("CACHE_TOTAL_COST_LIMIT", "0")),
            scale=float(os.getenv("DISPLAY_SCALE", "1.0")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


SETTINGS = LoaderSettings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger(f"cached-image-v{APP_VERSION}")
