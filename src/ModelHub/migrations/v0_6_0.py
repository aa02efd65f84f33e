"""Migration 0.6.0: baseline schema.

Unmarked legacy stores are assumed to be at this version, so its ``up`` never
runs in practice; it only anchors the timeline.
"""

from __future__ import annotations

DESCRIPTION = "Baseline schema"


def up(context) -> None:
    """No-op: 0.6.0 is the earliest supported schema."""


def down(context) -> None:
    """No-op: 0.7.2 made no data changes."""
