"""Persisted schema version marker."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ModelHub.core.errors import ConsistencyError
from ModelHub.core.version import Version, coerce_version
from ModelHub.utils.log import log

if TYPE_CHECKING:
    from ModelHub.storage.db import DocumentStore

MARKER_COLLECTION = "server_data"
MARKER_ID = "server_data"


class VersionMarkerStore:
    """Reads and replaces the single ``server_data`` document.

    The marker names the schema version the stored data currently conforms
    to. At most one marker may exist; it is only ever replaced wholesale.
    """

    def __init__(self, store: DocumentStore):
        """Initialize marker store.

        Args:
            store: Document store holding the ``server_data`` collection.
        """
        self.store = store

    def read(self) -> list[Version]:
        """Return the versions of every marker document found.

        Callers treat more than one entry as store corruption.
        """
        docs = self.store.find(MARKER_COLLECTION)
        return [Version.parse(str(doc["version"])) for doc in docs]

    def read_current(self) -> Version | None:
        """Return the installed version, or None when no marker exists.

        Raises:
            ConsistencyError: If more than one marker document exists.
        """
        versions = self.read()
        if len(versions) > 1:
            raise ConsistencyError("Cannot have more than one server data document.")
        return versions[0] if versions else None

    def write(self, version: Version | str) -> None:
        """Replace the marker with ``version``.

        Runs delete-then-insert inside one transaction so a crash never leaves
        zero or two markers behind.
        """
        parsed = coerce_version(version)
        with self.store.transaction():
            self.store.delete_many(MARKER_COLLECTION)
            self.store.insert_many(
                MARKER_COLLECTION,
                [{"id": MARKER_ID, "version": str(parsed)}],
            )
        log.debug("Version marker set to %s", parsed)
