"""Migration 0.7.2: version bump only."""

from __future__ import annotations

DESCRIPTION = "Version bump, no data changes"


def up(context) -> None:
    pass


def down(context) -> None:
    pass
