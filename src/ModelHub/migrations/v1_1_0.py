"""Migration 1.1.0: version bump only."""

from __future__ import annotations

DESCRIPTION = "Version bump, no data changes"


def up(context) -> None:
    pass
