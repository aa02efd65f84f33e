"""Run logging configuration (the ``log`` section)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ModelHub.config.common import (
    expect_bool,
    expect_str,
    get_optional_value,
    get_section,
)

_ALLOWED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LEVEL_ALIASES = {"WARN": "WARNING"}


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Logging settings for one CLI run.

    Attributes:
        level: Console level name.
        to_file: Whether each run writes its own DEBUG log file.
        dir: Base directory for run log files.
    """

    level: str
    to_file: bool
    dir: str


def _normalize_level(value: str) -> str:
    level = value.strip().upper()
    return _LEVEL_ALIASES.get(level, level)


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Load the ``log`` section; every key is optional.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "log", required=False)
    level = expect_str(get_optional_value(section, "level", "INFO"), "log.level")
    return RuntimeConfig(
        level=_normalize_level(level),
        to_file=expect_bool(get_optional_value(section, "to_file", True), "log.to_file"),
        dir=expect_str(get_optional_value(section, "dir", "log"), "log.dir"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Reject unknown levels, and an empty directory when run logs are on.

    Raises:
        ValueError: If values violate runtime constraints.
    """
    if config.level not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log.level must be one of {list(_ALLOWED_LOG_LEVELS)}")
    if config.to_file and not config.dir.strip():
        raise ValueError("log.dir must not be empty when log.to_file is enabled")
