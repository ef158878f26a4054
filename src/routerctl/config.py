"""Runtime settings: built-in defaults, ``ROUTERCTL_*`` environment, CLI flags."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

_LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "ROUTERCTL_"


class Settings(BaseSettings):
    """Connection and loop settings for one routerctl run."""

    model_config = {
        "env_prefix": ENV_PREFIX,
        "frozen": True,
    }

    host: str = "192.168.16.1"
    user: str = "admin"
    password: str = "admin"
    timeout: float = 10.0            # seconds per HTTP request
    status_interval: float = 1.0     # seconds between status frames
    scan_interval: float = 8.0       # seconds between scan frames
    max_attempts: int | None = 30    # scans before giving up on --connect
    retry_delay: float = 2.0         # seconds between --connect scans
    strict_ssid: bool = False        # fail instead of showing a placeholder SSID
    debug_log: str = "/tmp/routerctl_debug.log"

    @field_validator("max_attempts")
    @classmethod
    def zero_means_unbounded(cls, v: int | None) -> int | None:
        """0 or a negative count means "retry forever"."""
        if v is not None and v <= 0:
            return None
        return v

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``ROUTERCTL_*`` variables over the defaults.

        Variables that fail validation are logged and their default is kept.
        """
        try:
            return cls()
        except ValidationError as exc:
            bad = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
        for name in sorted(bad):
            _LOGGER.warning("ignoring %s%s: not a valid value", ENV_PREFIX, name.upper())
        # Init values outrank the environment.
        return cls(**{name: cls.model_fields[name].default for name in bad})

    def override(self, **changes: Any) -> Settings:
        """Return a copy with every non-None value in *changes* applied."""
        return self.model_copy(update={k: v for k, v in changes.items() if v is not None})
