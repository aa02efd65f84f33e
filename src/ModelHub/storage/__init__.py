"""Storage layer for ModelHub.

Provides database management, the JSON document store and the persisted
schema version marker.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ModelHub.storage.db import COLLECTIONS, ENTITY_COLLECTIONS, DatabaseManager, DocumentStore
from ModelHub.storage.marker import VersionMarkerStore
from ModelHub.utils.log import log

if TYPE_CHECKING:
    from ModelHub.config import AppConfig


def create_storage(config: AppConfig) -> tuple[DatabaseManager, DocumentStore, VersionMarkerStore]:
    """Create database manager and storage components.

    Args:
        config: Application configuration containing storage settings.

    Returns:
        Tuple of (db_manager, document_store, marker_store).
    """
    db_path = Path(config.storage.db_path)
    db_manager = DatabaseManager(db_path)
    store = DocumentStore(db_manager)
    log.info("Document store opened: %s", db_path)
    return db_manager, store, VersionMarkerStore(store)


__all__ = [
    "COLLECTIONS",
    "ENTITY_COLLECTIONS",
    "DatabaseManager",
    "DocumentStore",
    "VersionMarkerStore",
    "create_storage",
]
