"""
Environment-driven settings.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "EMITTERPRO_"

_TRUTHY = ("1", "true", "True", "yes")


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for emitterpro.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_json: Render log records as JSON instead of console output
        log_file: Optional file to append log records to
    """

    log_level: str = "INFO"
    log_json: bool = False
    log_file: Path | None = None

    def __post_init__(self):
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level: {self.log_level}")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``EMITTERPRO_*`` environment variables."""
    env = os.environ if environ is None else environ
    log_file = env.get(f"{ENV_PREFIX}LOG_FILE")
    return Settings(
        log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
        log_json=env.get(f"{ENV_PREFIX}LOG_JSON", "0") in _TRUTHY,
        log_file=Path(log_file) if log_file else None,
    )
