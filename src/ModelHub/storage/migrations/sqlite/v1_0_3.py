"""SQLite-specific part of migration 1.0.3: index outgoing webhook urls."""

from __future__ import annotations

from ModelHub.storage.db import WEBHOOK_URL_INDEX_DDL

DESCRIPTION = "Index webhooks by url"


def up(context) -> None:
    context.store.conn.execute(WEBHOOK_URL_INDEX_DDL)
