"""Runtime configuration and logging setup for the day scheduler service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("DAY_SCHEDULER_ENV", "development"))
    host: str = field(default_factory=lambda: os.getenv("DAY_SCHEDULER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("DAY_SCHEDULER_PORT", 8080))
    log_level: str = field(default_factory=lambda: os.getenv("DAY_SCHEDULER_LOG_LEVEL", "INFO"))
    cors_origins: list[str] = field(default_factory=lambda: _env_list("DAY_SCHEDULER_CORS_ORIGINS", "*"))

    # Look-back window used by the /recent routes when ?days is omitted.
    recent_days: int = field(default_factory=lambda: _env_int("DAY_SCHEDULER_RECENT_DAYS", 7))
    seed_data: bool = field(default_factory=lambda: _env_bool("DAY_SCHEDULER_SEED_DATA", False))

    def __post_init__(self) -> None:
        if self.recent_days < 0:
            raise ValueError("DAY_SCHEDULER_RECENT_DAYS must not be negative.")


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=_LOG_FORMAT,
        force=True,
    )
