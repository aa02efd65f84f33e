"""Command implementations for ModelHub CLI.

Encapsulates migration business logic, separated from CLI parameter
handling and resource management.
"""

from __future__ import annotations

from dataclasses import dataclass

import click

from ModelHub.core.version import validate_version
from ModelHub.migration import MigrationEngine, MigrationOutcome
from ModelHub.utils.log import log


@dataclass(slots=True)
class MigrateCommand:
    """Migrate the database to a target version."""

    engine: MigrationEngine
    target: str | None
    skip_confirm: bool

    @staticmethod
    def check_target(target: str | None) -> None:
        """Reject a malformed target version before any storage is opened.

        Raises:
            ValidationError: If ``target`` is not a dotted version.
        """
        if target is not None:
            validate_version(target)

    def execute(self) -> MigrationOutcome:
        outcome = self.engine.migrate(self.target, skip_confirm=self.skip_confirm)
        if outcome.applied:
            log.debug(
                "Applied %d steps: %s",
                len(outcome.applied),
                ", ".join(str(v) for v in outcome.applied),
            )
        return outcome


@dataclass(slots=True)
class CheckCommand:
    """Verify the database is at the version this server expects.

    Run on server startup; initializes empty databases and migrates unmarked
    legacy ones automatically.
    """

    engine: MigrationEngine

    def execute(self) -> None:
        version = self.engine.check_version()
        log.info("Database version %s is current.", version)


@dataclass(slots=True)
class StatusCommand:
    """Print installed, newest and pending versions."""

    engine: MigrationEngine

    def execute(self) -> None:
        status = self.engine.status()
        installed = str(status.installed) if status.installed else "none"
        click.echo(f"Installed version: {installed}")
        click.echo(f"Newest version:    {status.newest}")
        click.echo(f"Known steps:       {', '.join(str(v) for v in status.available)}")
        if status.installed is None:
            click.echo("No version marker; run 'modelhub check' or 'modelhub migrate'.")
        elif status.pending:
            verb = "up" if status.direction > 0 else "down"
            click.echo(f"Pending ({verb}):      {', '.join(str(v) for v in status.pending)}")
        else:
            click.echo("Pending:           none")
