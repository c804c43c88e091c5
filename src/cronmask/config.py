"""Process-wide settings for cronmask.

Settings are read from the environment on first use:

    CRONMASK_TIMEZONE               default zone for parse() when none is given
                                    (IANA name; unset means the system zone)
    CRONMASK_SEARCH_HORIZON_YEARS   years the next-occurrence search looks ahead
    CRONMASK_LOG_LEVEL              level used by the command-line tool

Usage:
    >>> from cronmask.config import CronConfig, set_config
    >>> set_config(CronConfig(default_timezone="Europe/Berlin"))
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzlocal import get_localzone

from cronmask.exceptions import CronParseError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CRONMASK_"
DEFAULT_SEARCH_HORIZON_YEARS = 5


@dataclass
class CronConfig:
    """Configuration for parsing and searching.

    Attributes:
        default_timezone: IANA zone used when parse() gets no zone.
            None means the system's local zone.
        search_horizon_years: How many years past the reference instant the
            search may run before giving up.
        log_level: Logging level name for the command-line tool.
    """

    default_timezone: str | None = None
    search_horizon_years: int = DEFAULT_SEARCH_HORIZON_YEARS
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if isinstance(self.search_horizon_years, str):
            self.search_horizon_years = int(self.search_horizon_years)
        if self.search_horizon_years < 1:
            raise ValueError(
                f"search_horizon_years must be at least 1, got {self.search_horizon_years}"
            )
        self.log_level = self.log_level.upper()
        if self.default_timezone == "":
            self.default_timezone = None

    @classmethod
    def from_env(cls) -> "CronConfig":
        """Build a config from CRONMASK_* environment variables."""
        kwargs: dict[str, str] = {}
        for name, key in (
            ("default_timezone", "TIMEZONE"),
            ("search_horizon_years", "SEARCH_HORIZON_YEARS"),
            ("log_level", "LOG_LEVEL"),
        ):
            value = os.getenv(f"{ENV_PREFIX}{key}")
            if value:
                kwargs[name] = value
        return cls(**kwargs)

    def default_tzinfo(self) -> tzinfo:
        """Zone used when a caller does not supply one."""
        if self.default_timezone:
            return load_timezone(self.default_timezone)
        return get_localzone()


_config: CronConfig | None = None
_config_lock = threading.Lock()


def get_config() -> CronConfig:
    """Return the process-wide config, reading the environment on first use."""
    global _config
    with _config_lock:
        if _config is None:
            _config = CronConfig.from_env()
            logger.debug("Loaded cronmask config: %s", _config)
        return _config


def set_config(config: CronConfig) -> None:
    global _config
    with _config_lock:
        _config = config


def reset_config() -> None:
    """Forget the current config; the next get_config() re-reads the environment."""
    global _config
    with _config_lock:
        _config = None


def load_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise CronParseError(f"unknown time zone: {name}", name) from e


def resolve_timezone(tz: tzinfo | str | None) -> tzinfo:
    """Turn a zone argument into a tzinfo, applying the configured default."""
    if tz is None:
        return get_config().default_tzinfo()
    if isinstance(tz, str):
        return load_timezone(tz)
    return tz
