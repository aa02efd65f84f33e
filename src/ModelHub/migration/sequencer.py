"""Migration plan construction."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from ModelHub.core.errors import UnknownVersionError
from ModelHub.core.version import Version, coerce_version, compare_versions, sort_versions

FORWARD = 1
BACKWARD = -1


@dataclass(slots=True)
class MigrationPlan:
    """Ordered, directional list of steps for one run.

    The plan is consumed destructively: :meth:`pop_next` removes the step it
    returns.
    """

    direction: int
    steps: deque[Version] = field(default_factory=deque)

    @property
    def transformation(self) -> str:
        """Name of the step callable this plan runs: ``"up"`` or ``"down"``."""
        return "down" if self.direction == BACKWARD else "up"

    def pop_next(self) -> Version:
        return self.steps.popleft()

    def versions(self) -> list[Version]:
        return list(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __bool__(self) -> bool:
        return bool(self.steps)


def build_plan(
    current: Version | str,
    target: Version | str | None,
    available: Iterable[Version | str],
) -> MigrationPlan:
    """Compute the steps that move the store from ``current`` to ``target``.

    Args:
        current: Installed version.
        target: Requested version, or None for the newest available one.
        available: Versions of every discoverable step.

    Returns:
        Forward plan of ``up`` steps after ``current`` up to ``target``, or a
        backward plan of ``down`` steps from just below ``current`` down to
        ``target``. Empty when both versions are equal.

    Raises:
        UnknownVersionError: If ``current`` or ``target`` has no step.
    """
    current_v = coerce_version(current)
    target_v = coerce_version(target) if target is not None else None

    direction = compare_versions(current_v, target_v)
    if direction == 0:
        return MigrationPlan(direction=FORWARD)

    ordered = sort_versions(available)
    if target_v is None:
        if not ordered:
            raise UnknownVersionError("No migration steps are available")
        target_v = ordered[-1]

    try:
        start = ordered.index(current_v)
    except ValueError:
        raise UnknownVersionError(f"Installed version {current_v} has no migration step") from None
    try:
        end = ordered.index(target_v)
    except ValueError:
        raise UnknownVersionError(f"Requested version {target_v} has no migration step") from None

    low, high = min(start, end), max(start, end)
    window = ordered[low : high + 1]

    if direction == FORWARD:
        return MigrationPlan(direction=FORWARD, steps=deque(window[1:]))
    return MigrationPlan(direction=BACKWARD, steps=deque(reversed(window[:-1])))
