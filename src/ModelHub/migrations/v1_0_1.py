"""Migration 1.0.1: users gain the ``changePassword`` flag."""

from __future__ import annotations

from ModelHub.migration.context import iter_batches

DESCRIPTION = "Users gain changePassword"


def up(context) -> None:
    """Handle the migration from 0.10.2 to 1.0.1.

    Existing users keep their passwords, so the flag starts out false.
    """
    store = context.store
    for idx, users in iter_batches(store, "users"):
        with context.backup("users", users, f"101-{idx}"), store.transaction():
            for user in users:
                user["changePassword"] = False
                store.replace_one("users", user)


def down(context) -> None:
    """Handle the migration from 1.0.3 back to 1.0.1.

    Outgoing webhooks get their ``url`` and ``token`` folded back into a
    ``response`` object.
    """
    store = context.store
    with store.transaction():
        for _, webhooks in iter_batches(store, "webhooks"):
            for webhook in webhooks:
                if webhook.get("type") != "Outgoing" or "url" not in webhook:
                    continue
                response = {"url": webhook.pop("url")}
                if "token" in webhook:
                    response["token"] = webhook.pop("token")
                webhook["response"] = response
                store.replace_one("webhooks", webhook)
