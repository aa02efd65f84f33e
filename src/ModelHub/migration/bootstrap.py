"""First-run decision for stores that carry no version marker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from ModelHub.core.version import Version
from ModelHub.utils.log import log

if TYPE_CHECKING:
    from ModelHub.storage.db import DocumentStore
    from ModelHub.storage.marker import VersionMarkerStore

StateKind = Literal["current", "fresh", "legacy"]


@dataclass(frozen=True, slots=True)
class InitialState:
    """Installed state resolved at the start of a run.

    Attributes:
        kind: ``current`` when a marker exists, ``fresh`` for a new empty
            store (marker just written), ``legacy`` for unmarked data.
        version: Version to treat as installed.
    """

    kind: StateKind
    version: Version


class Bootstrapper:
    """Resolves the installed version, initializing brand-new stores."""

    def __init__(
        self,
        store: DocumentStore,
        marker_store: VersionMarkerStore,
        *,
        baseline: Version,
        newest: Version,
    ) -> None:
        """Initialize bootstrapper.

        Args:
            store: Document store probed for existing data.
            marker_store: Marker reader/writer.
            baseline: Earliest version the engine can migrate from.
            newest: Version a fresh install starts at.
        """
        self.store = store
        self.marker_store = marker_store
        self.baseline = baseline
        self.newest = newest

    def resolve_initial_state(self) -> InitialState:
        """Return the installed state, writing the marker for fresh installs.

        Raises:
            ConsistencyError: If more than one marker exists.
        """
        current = self.marker_store.read_current()
        if current is not None:
            return InitialState(kind="current", version=current)

        records = self.store.count_entities()
        if records:
            log.info("No server data found, %d existing records; assuming version %s.", records, self.baseline)
            return InitialState(kind="legacy", version=self.baseline)

        # Nothing stored yet; drop leftovers such as stale tables before stamping.
        self.store.clear()
        self.marker_store.write(self.newest)
        log.info("Initialized empty database at version %s.", self.newest)
        return InitialState(kind="fresh", version=self.newest)
