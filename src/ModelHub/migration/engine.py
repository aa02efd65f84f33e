"""Migration engine: wires gate, bootstrap, sequencing and execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ModelHub.core.errors import UnknownVersionError, VersionMismatchError
from ModelHub.core.version import Version, compare_versions
from ModelHub.migration.bootstrap import Bootstrapper, InitialState, StateKind
from ModelHub.migration.confirm import ConfirmationGate
from ModelHub.migration.runner import MigrationRunner
from ModelHub.migration.sequencer import MigrationPlan, build_plan
from ModelHub.utils.log import log

if TYPE_CHECKING:
    from ModelHub.migration.context import MigrationContext
    from ModelHub.migration.registry import MigrationRegistry
    from ModelHub.storage.marker import VersionMarkerStore

MIGRATION_COMPLETE = "Database migration complete."
ALREADY_UP_TO_DATE = "Database already up to date."


@dataclass(frozen=True, slots=True)
class MigrationOutcome:
    """Summary of one ``migrate`` call."""

    state: StateKind
    start: Version
    target: Version
    direction: int
    applied: tuple[Version, ...]
    message: str


@dataclass(frozen=True, slots=True)
class MigrationStatus:
    """Read-only view of the store's migration state."""

    installed: Version | None
    newest: Version
    available: tuple[Version, ...]
    pending: tuple[Version, ...] = field(default=())
    direction: int = 1


class MigrationEngine:
    """Entry point for migration runs and the startup version check.

    Args:
        registry: Source of migration steps.
        marker_store: Persisted version marker.
        context: Context handed to every step transformation.
        baseline: Earliest version; assumed for unmarked legacy data.
        newest: Version this server expects. None means the newest
            discovered step.
        gate: Confirmation gate; a default console gate when omitted.
    """

    def __init__(
        self,
        registry: MigrationRegistry,
        marker_store: VersionMarkerStore,
        context: MigrationContext,
        *,
        baseline: Version,
        newest: Version | None = None,
        gate: ConfirmationGate | None = None,
    ) -> None:
        self.registry = registry
        self.marker_store = marker_store
        self.context = context
        self.baseline = baseline
        self.configured_newest = newest
        self.gate = gate or ConfirmationGate()

    def newest_version(self) -> Version:
        """Return the configured newest version, or the newest discovered step.

        Raises:
            UnknownVersionError: If nothing is configured and no step exists.
        """
        if self.configured_newest is not None:
            return self.configured_newest
        available = self.registry.discover()
        if not available:
            raise UnknownVersionError("No migration steps are available")
        return available[-1]

    def _bootstrapper(self, fresh_version: Version | None = None) -> Bootstrapper:
        return Bootstrapper(
            self.context.store,
            self.marker_store,
            baseline=self.baseline,
            newest=fresh_version or self.newest_version(),
        )

    def _execute(self, state: InitialState, target: Version | None) -> MigrationOutcome:
        available = self.registry.discover()
        plan: MigrationPlan = build_plan(state.version, target, available)
        resolved_target = target if target is not None else available[-1]

        if not plan:
            log.info(ALREADY_UP_TO_DATE)
            return MigrationOutcome(
                state=state.kind,
                start=state.version,
                target=resolved_target,
                direction=plan.direction,
                applied=(),
                message=ALREADY_UP_TO_DATE,
            )

        log.info(
            "Migrating database from %s to %s (%d steps)",
            state.version,
            resolved_target,
            len(plan),
        )
        direction = plan.direction
        runner = MigrationRunner(self.registry, self.marker_store, self.context)
        applied = runner.run(plan)
        log.info(MIGRATION_COMPLETE)
        return MigrationOutcome(
            state=state.kind,
            start=state.version,
            target=resolved_target,
            direction=direction,
            applied=tuple(applied),
            message=MIGRATION_COMPLETE,
        )

    def migrate(self, target: str | Version | None = None, *, skip_confirm: bool = False) -> MigrationOutcome:
        """Migrate the store to ``target`` (default: the newest version).

        Args:
            target: Requested version string or Version.
            skip_confirm: Skip the interactive confirmation.

        Returns:
            Outcome of the run.

        Raises:
            ValidationError: If ``target`` is malformed; nothing is touched.
            ConsistencyError: If more than one marker exists.
            UnknownVersionError: If either end of the run has no step.
            MissingTransformationError: If a step lacks the needed direction.
            StepExecutionError: If a step's transformation fails.
        """
        requested = Version.parse(target) if isinstance(target, str) else target
        self.gate.confirm(skip=skip_confirm)

        if requested is not None and requested not in self.registry.discover():
            raise UnknownVersionError(f"Requested version {requested} has no migration step")

        # An empty store has nothing to transform; it starts at the requested version.
        state = self._bootstrapper(fresh_version=requested).resolve_initial_state()
        if requested is None:
            requested = self.configured_newest
        return self._execute(state, requested)

    def check_version(self) -> Version:
        """Verify the store is at the newest version, as done on server startup.

        Brand-new stores are stamped with the newest version; unmarked legacy
        stores are migrated forward from the baseline without confirmation.

        Returns:
            The installed version after the check.

        Raises:
            ConsistencyError: If more than one marker exists.
            VersionMismatchError: If the installed version is not the newest.
        """
        newest = self.newest_version()
        state = self._bootstrapper().resolve_initial_state()
        if state.kind == "legacy":
            log.info("No version marker found, automatically migrating.")
            self._execute(state, newest)
            return newest
        if compare_versions(state.version, newest) != 0:
            raise VersionMismatchError(
                f"Database is at version {state.version} but this server expects {newest}. "
                "Please run 'modelhub migrate' to migrate the database."
            )
        return state.version

    def status(self) -> MigrationStatus:
        """Describe installed, newest and pending versions without writing."""
        available = self.registry.discover()
        newest = self.newest_version()
        installed = self.marker_store.read_current()
        if installed is None:
            return MigrationStatus(installed=None, newest=newest, available=available)
        plan = build_plan(installed, newest, available)
        return MigrationStatus(
            installed=installed,
            newest=newest,
            available=available,
            pending=tuple(plan.versions()),
            direction=plan.direction,
        )
