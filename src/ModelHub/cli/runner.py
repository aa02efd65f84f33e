"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

from typing import Callable

import click

from ModelHub.cli.commands import CheckCommand, MigrateCommand, StatusCommand
from ModelHub.config import AppConfig
from ModelHub.migration import ConfirmationGate, MigrationEngine, create_engine
from ModelHub.storage import create_storage
from ModelHub.utils.log import configure_logging, log

_FAILURE_MESSAGES = {
    "migrate": "Database migration failed.",
    "check": "Database version check failed.",
    "status": "Could not read migration status.",
}


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Handles logging configuration, component creation, database context
    management, and error handling for CLI commands.
    """

    def __init__(self, config: AppConfig, gate: ConfirmationGate | None = None) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
            gate: Optional confirmation gate override.
        """
        self.config = config
        self.gate = gate

    def run_migrate(self, action: str, target: str | None, skip_confirm: bool) -> None:
        """Execute the migrate command.

        Raises:
            click.Abort: When the migration fails.
        """
        self._run(
            action,
            lambda engine: MigrateCommand(engine, target, skip_confirm).execute(),
            preflight=lambda: MigrateCommand.check_target(target),
        )

    def run_check(self, action: str) -> None:
        """Execute the startup version check.

        Raises:
            click.Abort: When the check fails.
        """
        self._run(action, lambda engine: CheckCommand(engine).execute())

    def run_status(self, action: str) -> None:
        """Execute the status report.

        Raises:
            click.Abort: When the status cannot be read.
        """
        self._run(action, lambda engine: StatusCommand(engine).execute())

    def _run(
        self,
        action: str,
        body: Callable[[MigrationEngine], object],
        preflight: Callable[[], object] | None = None,
    ) -> None:
        log_path = configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        try:
            # Argument checks run before the database file is opened or created.
            if preflight is not None:
                preflight()
            db_manager, store, marker_store = create_storage(self.config)
            with db_manager:
                engine = create_engine(self.config, store, marker_store, gate=self.gate)
                body(engine)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.debug("%s failed: %r", action, e, exc_info=True)
            summary = _FAILURE_MESSAGES.get(action, f"{action} failed.")
            if log_path is not None:
                log.warning("%s See debug log %s for more details.", summary, log_path)
            else:
                log.warning("%s Rerun with log.to_file enabled for more details.", summary)
            raise click.Abort from e
