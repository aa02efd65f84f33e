"""CLI package for ModelHub command orchestration.

This package contains the modular CLI components for the migration
commands, factored into separate modules for better maintainability and
testability.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from ModelHub.cli.runner import CommandRunner
from ModelHub.cli.ui import cli


def main() -> None:
    """Run ModelHub CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
