"""Dotted-numeric schema versions.

Versions such as ``"0.6.0.1"`` or ``"1.0.3"`` name the data-model revision a
store has been migrated to. Trailing zero components carry no meaning, so
``"1.0"`` and ``"1.0.0"`` denote the same version.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from typing import Iterable

from ModelHub.core.errors import ValidationError

_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")


def validate_version(text: str) -> str:
    """Validate a version string and return it stripped of surrounding space.

    Args:
        text: Candidate version string, e.g. ``"1.0.4"``.

    Returns:
        The stripped version string.

    Raises:
        ValidationError: If ``text`` is not a dot-delimited list of
            non-negative integers.
    """
    if not isinstance(text, str):
        raise ValidationError(f"Version must be a string, got {type(text).__name__}")
    candidate = text.strip()
    if not _VERSION_RE.match(candidate):
        raise ValidationError(f"Invalid version string: {text!r}")
    return candidate


def _strip_trailing_zeros(parts: Iterable[int]) -> tuple[int, ...]:
    out = list(parts)
    while out and out[-1] == 0:
        out.pop()
    return tuple(out)


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """A parsed schema version.

    Equality, hashing and ordering use the normalized ``parts`` only; ``text``
    keeps the spelling the version was created from.
    """

    parts: tuple[int, ...]
    text: str = field(compare=False)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse and validate a dotted version string.

        Raises:
            ValidationError: If ``text`` is malformed.
        """
        clean = validate_version(text)
        return cls(
            parts=_strip_trailing_zeros(int(p) for p in clean.split(".")),
            text=clean,
        )

    def __str__(self) -> str:
        return self.text

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare_versions(self, other) == 1


def coerce_version(value: Version | str) -> Version:
    """Return ``value`` as a Version, parsing strings."""
    if isinstance(value, Version):
        return value
    return Version.parse(value)


def compare_versions(from_version: Version | str | None, to_version: Version | str | None) -> int:
    """Compare two versions.

    ``to_version=None`` stands for "the newest known version", which is always
    ahead of ``from_version``.

    Args:
        from_version: Installed version.
        to_version: Target version, or None for latest.

    Returns:
        1 if ``to_version`` is newer, -1 if ``from_version`` is newer, 0 if
        they are equal once trailing zeros are ignored.

    Raises:
        ValidationError: If a string argument is malformed.
    """
    if to_version is None:
        return 1
    if from_version is None:
        # Nothing installed yet: any concrete target lies ahead.
        return 1

    left = coerce_version(from_version).parts
    right = coerce_version(to_version).parts

    for idx in range(max(len(left), len(right))):
        a = left[idx] if idx < len(left) else 0
        b = right[idx] if idx < len(right) else 0
        if a > b:
            return -1
        if b > a:
            return 1
    return 0


def sort_versions(versions: Iterable[Version | str]) -> list[Version]:
    """Return versions de-duplicated and sorted ascending."""
    unique: dict[Version, Version] = {}
    for value in versions:
        parsed = coerce_version(value)
        unique.setdefault(parsed, parsed)
    return sorted(unique.values())
