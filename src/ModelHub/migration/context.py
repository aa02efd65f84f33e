"""Runtime context handed to migration step transformations."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, Sequence

from ModelHub.utils.log import log

if TYPE_CHECKING:
    from ModelHub.storage.db import DocumentStore

BATCH_SIZE = 5000


@dataclass(slots=True)
class MigrationContext:
    """What a step's ``up``/``down`` receives.

    Attributes:
        store: Document store the step rewrites.
        data_dir: Directory for backups taken while documents are rewritten.
    """

    store: DocumentStore
    data_dir: Path

    @contextmanager
    def backup(self, collection: str, docs: Sequence[dict[str, Any]], tag: str) -> Iterator[Path]:
        """Keep a JSON copy of ``docs`` on disk while they are rewritten.

        The file is removed when the block finishes cleanly and left in place
        when it raises, so an operator can restore the documents by hand.

        Args:
            collection: Collection the documents come from.
            docs: Documents about to be rewritten.
            tag: Short label for the file name, e.g. ``"103-0"``.

        Yields:
            Path of the backup file.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self.data_dir / f"{collection}-{tag}.json"
        path.write_text(json.dumps(list(docs), ensure_ascii=False), encoding="utf-8")
        log.debug("Backed up %d %s documents to %s", len(docs), collection, path)
        yield path
        if path.exists():
            path.unlink()


def iter_batches(
    store: DocumentStore, collection: str, size: int = BATCH_SIZE
) -> Iterator[tuple[int, list[dict[str, Any]]]]:
    """Yield ``(batch_index, documents)`` pages of a collection.

    The collection size is read once up front; steps must not insert or delete
    documents of the collection they page through.
    """
    total = store.count(collection)
    for index, skip in enumerate(range(0, total, size)):
        yield index, store.find(collection, skip=skip, limit=size)
