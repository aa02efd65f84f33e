"""Migration 1.0.3: outgoing webhooks store ``url``/``token`` at top level.

There is no ``down``: reverting the 1.1.0 release is not supported.
"""

from __future__ import annotations

from ModelHub.migration.context import iter_batches

DESCRIPTION = "Outgoing webhooks move response.url/response.token to url/token"


def up(context) -> None:
    store = context.store
    for idx, webhooks in iter_batches(store, "webhooks"):
        with context.backup("webhooks", webhooks, f"103-{idx}"), store.transaction():
            for webhook in webhooks:
                if webhook.get("type") != "Outgoing" or "response" not in webhook:
                    continue
                response = webhook.pop("response") or {}
                webhook["url"] = response.get("url")
                if "token" in response:
                    webhook["token"] = response["token"]
                store.replace_one("webhooks", webhook)
