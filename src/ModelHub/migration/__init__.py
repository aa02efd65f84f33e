"""Schema version migration engine.

Tracks which data-model version is stored, plans the linear path of steps
between the installed and the requested version, and runs each step's
``up`` or ``down`` while keeping the version marker in step with progress.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ModelHub.core.version import Version
from ModelHub.migration.bootstrap import Bootstrapper, InitialState
from ModelHub.migration.confirm import ConfirmationGate
from ModelHub.migration.context import MigrationContext, iter_batches
from ModelHub.migration.engine import (
    ALREADY_UP_TO_DATE,
    MIGRATION_COMPLETE,
    MigrationEngine,
    MigrationOutcome,
    MigrationStatus,
)
from ModelHub.migration.registry import (
    DirectoryMigrationRegistry,
    MigrationRegistry,
    MigrationStep,
    TableMigrationRegistry,
    default_locations,
)
from ModelHub.migration.runner import MigrationRunner
from ModelHub.migration.sequencer import BACKWARD, FORWARD, MigrationPlan, build_plan
from ModelHub.utils.log import log

if TYPE_CHECKING:
    from ModelHub.config import AppConfig
    from ModelHub.storage.db import DocumentStore
    from ModelHub.storage.marker import VersionMarkerStore


def create_engine(
    config: AppConfig,
    store: DocumentStore,
    marker_store: VersionMarkerStore,
    gate: ConfirmationGate | None = None,
) -> MigrationEngine:
    """Build a migration engine from configuration.

    Args:
        config: Application configuration.
        store: Open document store.
        marker_store: Marker store over ``store``.
        gate: Optional confirmation gate override.

    Returns:
        Configured MigrationEngine.
    """
    locations = default_locations(config.storage.backend, config.migration.extra_dirs)
    log.debug("Migration locations: %s", [str(p) for p in locations])
    latest = config.migration.latest_version
    return MigrationEngine(
        DirectoryMigrationRegistry(locations),
        marker_store,
        MigrationContext(store=store, data_dir=Path(config.storage.data_dir)),
        baseline=Version.parse(config.migration.baseline_version),
        newest=Version.parse(latest) if latest else None,
        gate=gate,
    )


__all__ = [
    "ALREADY_UP_TO_DATE",
    "BACKWARD",
    "FORWARD",
    "MIGRATION_COMPLETE",
    "Bootstrapper",
    "ConfirmationGate",
    "DirectoryMigrationRegistry",
    "InitialState",
    "MigrationContext",
    "MigrationEngine",
    "MigrationOutcome",
    "MigrationPlan",
    "MigrationRegistry",
    "MigrationRunner",
    "MigrationStatus",
    "MigrationStep",
    "TableMigrationRegistry",
    "build_plan",
    "create_engine",
    "default_locations",
    "iter_batches",
]
