"""Migration domain configuration: version timeline constants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ModelHub.config.common import (
    expect_str_list,
    expect_version,
    get_optional_value,
    get_section,
)
from ModelHub.core.version import compare_versions

DEFAULT_BASELINE_VERSION = "0.6.0"


@dataclass(frozen=True, slots=True)
class MigrationConfig:
    """Migration configuration.

    Attributes:
        baseline_version: Version assumed for stores holding data but no marker.
        latest_version: Version this server expects; None means the newest
            discovered step.
        extra_dirs: Additional directories scanned for step modules.
    """

    baseline_version: str
    latest_version: str | None
    extra_dirs: tuple[str, ...]


def load_migration(raw: Mapping[str, Any]) -> MigrationConfig:
    """Load migration domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If a version string is malformed.
    """
    section = get_section(raw, "migration", required=False)
    latest = get_optional_value(section, "latest_version", None)
    return MigrationConfig(
        baseline_version=expect_version(
            get_optional_value(section, "baseline_version", DEFAULT_BASELINE_VERSION),
            "migration.baseline_version",
        ),
        latest_version=None if latest is None else expect_version(latest, "migration.latest_version"),
        extra_dirs=tuple(
            expect_str_list(get_optional_value(section, "extra_dirs", []), "migration.extra_dirs")
        ),
    )


def check_migration(config: MigrationConfig) -> None:
    """Validate migration domain constraints."""
    if config.latest_version is not None and compare_versions(
        config.baseline_version, config.latest_version
    ) < 0:
        raise ValueError("migration.latest_version must not be older than migration.baseline_version")
    for idx, path in enumerate(config.extra_dirs):
        if not path.strip():
            raise ValueError(f"migration.extra_dirs[{idx}] must not be empty")
