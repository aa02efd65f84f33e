"""Storage domain configuration for the document store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ModelHub.config.common import (
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)

_ALLOWED_BACKENDS = {"sqlite"}


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Storage configuration."""

    db_path: str
    backend: str
    data_dir: str


def load_storage(raw: Mapping[str, Any]) -> StorageConfig:
    """Load storage domain config from raw mapping."""
    section = get_section(raw, "storage", required=True)
    return StorageConfig(
        db_path=expect_str(get_required_value(section, "db_path", "storage.db_path"), "storage.db_path"),
        backend=expect_str(get_optional_value(section, "backend", "sqlite"), "storage.backend"),
        data_dir=expect_str(get_optional_value(section, "data_dir", "data"), "storage.data_dir"),
    )


def check_storage(config: StorageConfig) -> None:
    """Validate storage domain constraints."""
    if not config.db_path.strip():
        raise ValueError("storage.db_path must not be empty")
    if config.backend not in _ALLOWED_BACKENDS:
        raise ValueError(f"storage.backend must be one of {sorted(_ALLOWED_BACKENDS)}")
    if not config.data_dir.strip():
        raise ValueError("storage.data_dir must not be empty")
