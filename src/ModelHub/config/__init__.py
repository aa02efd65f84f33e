"""Public configuration API for ModelHub."""

from __future__ import annotations

from ModelHub.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from ModelHub.config.migration import MigrationConfig
from ModelHub.config.runtime import RuntimeConfig
from ModelHub.config.storage import StorageConfig

__all__ = [
    "RuntimeConfig",
    "StorageConfig",
    "MigrationConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
