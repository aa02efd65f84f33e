"""Discovery and loading of migration steps.

A step is a Python module named after the version it upgrades *to*:
``v1_0_3.py`` holds the step for ``1.0.3``. The module may define ``up`` and
``down``, both taking a :class:`~ModelHub.migration.context.MigrationContext`,
plus an optional ``DESCRIPTION`` string.
"""

from __future__ import annotations

import importlib.util
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Callable, Mapping, Protocol, Sequence

from ModelHub.core.errors import ConsistencyError, StepNotFoundError
from ModelHub.core.version import Version, coerce_version, sort_versions
from ModelHub.utils.log import log

Transformation = Callable[..., None]

_STEP_FILE_RE = re.compile(r"^v(\d+(?:_\d+)*)\.py$")

BUNDLED_MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"
BACKEND_MIGRATIONS_ROOT = Path(__file__).resolve().parents[1] / "storage" / "migrations"


@dataclass(frozen=True, slots=True)
class MigrationStep:
    """One versioned transformation unit.

    Attributes:
        version: Version this step upgrades to.
        up: Forward transformation, if any.
        down: Reverse transformation restoring data to ``version`` from its
            successor, if any.
        description: Human-readable summary.
    """

    version: Version
    up: Transformation | None = None
    down: Transformation | None = None
    description: str = ""

    def transformation(self, direction: str) -> Transformation | None:
        """Return the ``"up"`` or ``"down"`` callable, or None if absent."""
        if direction not in ("up", "down"):
            raise ValueError(f"Unknown direction: {direction!r}")
        return self.up if direction == "up" else self.down


class MigrationRegistry(Protocol):
    """Source of migration steps."""

    def discover(self) -> tuple[Version, ...]:
        """Return every available step version, ascending and unique."""
        ...

    def load(self, version: Version | str) -> MigrationStep:
        """Return the step for ``version``.

        Raises:
            StepNotFoundError: If no step is registered for ``version``.
        """
        ...


class TableMigrationRegistry:
    """Registry over a compiled-in table of steps."""

    def __init__(self, steps: Mapping[str, MigrationStep] | Sequence[MigrationStep]):
        items = steps.values() if isinstance(steps, Mapping) else steps
        self._steps: dict[Version, MigrationStep] = {}
        for step in items:
            if step.version in self._steps:
                raise ConsistencyError(f"Duplicate migration step for version {step.version}")
            self._steps[step.version] = step

    def discover(self) -> tuple[Version, ...]:
        return tuple(sort_versions(self._steps))

    def load(self, version: Version | str) -> MigrationStep:
        parsed = coerce_version(version)
        try:
            return self._steps[parsed]
        except KeyError:
            raise StepNotFoundError(f"No migration step registered for version {parsed}") from None


def version_from_filename(name: str) -> Version | None:
    """Map ``v1_0_3.py`` to Version ``1.0.3``; None for other file names."""
    match = _STEP_FILE_RE.match(name)
    if not match:
        return None
    return Version.parse(match.group(1).replace("_", "."))


def _compose(parts: Sequence[Transformation]) -> Transformation | None:
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]

    def run_all(context) -> None:
        for part in parts:
            part(context)

    return run_all


class DirectoryMigrationRegistry:
    """Registry scanning fixed directories for step modules.

    When several locations provide the same version (a shared step plus a
    backend-specific one), the step runs every part in location order.
    """

    def __init__(self, locations: Sequence[Path]):
        """Initialize directory registry.

        Args:
            locations: Directories to scan, in the order their parts run.
                Missing directories are skipped.
        """
        self.locations = [Path(p) for p in locations]
        self._files: dict[Version, list[Path]] | None = None
        self._cache: dict[Version, MigrationStep] = {}

    def _scan(self) -> dict[Version, list[Path]]:
        if self._files is not None:
            return self._files

        found: dict[Version, list[Path]] = {}
        for location in self.locations:
            if not location.is_dir():
                log.debug("Migration location %s does not exist, skipping", location)
                continue
            seen_here: dict[Version, Path] = {}
            for path in sorted(location.iterdir()):
                version = version_from_filename(path.name)
                if version is None:
                    continue
                if version in seen_here:
                    raise ConsistencyError(
                        f"Migration files {seen_here[version].name} and {path.name} "
                        f"in {location} both declare version {version}"
                    )
                seen_here[version] = path
                found.setdefault(version, []).append(path)
        log.debug("Discovered %d migration steps in %d locations", len(found), len(self.locations))
        self._files = found
        return found

    def discover(self) -> tuple[Version, ...]:
        return tuple(sort_versions(self._scan()))

    def load(self, version: Version | str) -> MigrationStep:
        parsed = coerce_version(version)
        if parsed in self._cache:
            return self._cache[parsed]

        paths = self._scan().get(parsed)
        if not paths:
            raise StepNotFoundError(f"No migration step found for version {parsed}")

        modules = [_import_step_module(path, idx) for idx, path in enumerate(paths)]
        ups = [m.up for m in modules if callable(getattr(m, "up", None))]
        downs = [m.down for m in modules if callable(getattr(m, "down", None))]
        description = next(
            (m.DESCRIPTION for m in modules if isinstance(getattr(m, "DESCRIPTION", None), str)),
            "",
        )
        # Keep the spelling of the discovered file's version, e.g. "0.6.0.1".
        step = MigrationStep(
            version=version_from_filename(paths[0].name),
            up=_compose(ups),
            down=_compose(downs),
            description=description,
        )
        self._cache[parsed] = step
        return step


def _import_step_module(path: Path, index: int) -> ModuleType:
    module_name = f"ModelHub._migration_steps.p{index}_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise StepNotFoundError(f"Cannot import migration step {path}")
    module = importlib.util.module_from_spec(spec)
    # dataclasses and pickle resolve classes through sys.modules.
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def default_locations(backend: str, extra_dirs: Sequence[str] = ()) -> list[Path]:
    """Return the standard step locations for a storage backend.

    Order: bundled steps, backend-specific steps, then configured extras.
    """
    return [
        BUNDLED_MIGRATIONS_DIR,
        BACKEND_MIGRATIONS_ROOT / backend,
        *(Path(d) for d in extra_dirs),
    ]
