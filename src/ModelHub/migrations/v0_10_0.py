"""Migration 0.10.0: version bump; its ``down`` reverts the 0.10.2 changes."""

from __future__ import annotations

from ModelHub.migration.context import iter_batches

DESCRIPTION = "Version bump, no data changes"


def up(context) -> None:
    pass


def down(context) -> None:
    """Handle the migration from 0.10.2 back to 0.10.0.

    Artifacts lose ``size`` and get their ``name`` back from ``description``;
    elements lose the ``artifact`` reference.
    """
    store = context.store
    with store.transaction():
        for _, artifacts in iter_batches(store, "artifacts"):
            for artifact in artifacts:
                artifact.pop("size", None)
                artifact["name"] = artifact.pop("description", None)
                store.replace_one("artifacts", artifact)
        for _, elements in iter_batches(store, "elements"):
            for element in elements:
                element.pop("artifact", None)
                store.replace_one("elements", element)
