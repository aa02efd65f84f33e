"""Migration 0.10.2: artifact size/description and element artifact links."""

from __future__ import annotations

from ModelHub.migration.context import iter_batches

DESCRIPTION = "Artifacts gain size, name becomes description; elements gain artifact"


def up(context) -> None:
    """Handle the migration from 0.10.0 to 0.10.2.

    Adds ``size`` (0 until the blob is re-uploaded) to every artifact and
    renames ``name`` to ``description``. Adds an empty ``artifact`` reference
    to every element.
    """
    store = context.store
    for idx, artifacts in iter_batches(store, "artifacts"):
        with context.backup("artifacts", artifacts, f"0102-{idx}"), store.transaction():
            for artifact in artifacts:
                artifact["size"] = 0
                artifact["description"] = artifact.pop("name", None)
                store.replace_one("artifacts", artifact)

    for idx, elements in iter_batches(store, "elements"):
        with context.backup("elements", elements, f"0102-{idx}"), store.transaction():
            for element in elements:
                element.setdefault("artifact", None)
                store.replace_one("elements", element)


def down(context) -> None:
    """Handle the migration from 1.0.1 back to 0.10.2 by dropping ``changePassword``."""
    store = context.store
    with store.transaction():
        for _, users in iter_batches(store, "users"):
            for user in users:
                if "changePassword" in user:
                    del user["changePassword"]
                    store.replace_one("users", user)
