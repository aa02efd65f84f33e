"""Execution of migration plans."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ModelHub.core.errors import MigrationError, MissingTransformationError, StepExecutionError
from ModelHub.core.version import Version
from ModelHub.utils.log import log

if TYPE_CHECKING:
    from ModelHub.migration.context import MigrationContext
    from ModelHub.migration.registry import MigrationRegistry
    from ModelHub.migration.sequencer import MigrationPlan
    from ModelHub.storage.marker import VersionMarkerStore


class MigrationRunner:
    """Runs a plan step by step, advancing the version marker after each one.

    Every completed step is durable on its own: if a later step fails, or the
    process dies, the marker names the last step that finished and a rerun
    resumes from there.
    """

    def __init__(
        self,
        registry: MigrationRegistry,
        marker_store: VersionMarkerStore,
        context: MigrationContext,
    ) -> None:
        self.registry = registry
        self.marker_store = marker_store
        self.context = context

    def run(self, plan: MigrationPlan) -> list[Version]:
        """Execute ``plan`` until it is exhausted.

        Args:
            plan: Plan built by :func:`~ModelHub.migration.sequencer.build_plan`;
                emptied as steps complete.

        Returns:
            Versions applied, in execution order.

        Raises:
            StepNotFoundError: If the registry cannot load a planned step.
            MissingTransformationError: If a step lacks the plan's transformation.
            StepExecutionError: If a step's transformation raises.
        """
        applied: list[Version] = []
        direction = plan.transformation

        while plan:
            version = plan.pop_next()
            step = self.registry.load(version)
            transform = step.transformation(direction)
            if transform is None:
                raise MissingTransformationError(str(version), direction)

            log.info("Running migration %s (%s)", version, direction)
            if step.description:
                log.debug("Migration %s: %s", version, step.description)
            try:
                transform(self.context)
            except MigrationError:
                raise
            except Exception as exc:  # noqa: BLE001 - step bodies are arbitrary code
                raise StepExecutionError(str(version), direction, exc) from exc

            self.marker_store.write(version)
            applied.append(version)
            log.info("Migrated to version %s.", version)

        return applied
