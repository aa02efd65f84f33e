"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from ModelHub.cli.runner import CommandRunner
from ModelHub.config import load_config


@click.group(help="ModelHub: manage the document store schema version.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    load_dotenv()

    cfg = load_config(config_path)
    ctx.obj = cfg


@cli.command("migrate")
@click.option(
    "--to",
    "target",
    default=None,
    metavar="VERSION",
    help="Version to migrate to. Defaults to the newest known version.",
)
@click.option("-y", "skip_confirm", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def migrate_cmd(ctx: click.Context, target: str | None, skip_confirm: bool) -> None:
    """Migrate the database between schema versions.

    Raises:
        click.Abort: When the migration fails.
    """
    runner = CommandRunner(ctx.obj)
    runner.run_migrate(action=ctx.command.name, target=target, skip_confirm=skip_confirm)


@cli.command("check")
@click.pass_context
def check_cmd(ctx: click.Context) -> None:
    """Verify the database version, initializing new databases."""
    runner = CommandRunner(ctx.obj)
    runner.run_check(action=ctx.command.name)


@cli.command("status")
@click.pass_context
def status_cmd(ctx: click.Context) -> None:
    """Show installed, newest and pending versions."""
    runner = CommandRunner(ctx.obj)
    runner.run_status(action=ctx.command.name)
