"""Bundled migration steps for ModelHub's document store.

Each module in this package is named after the version it migrates *to*
(``v1_0_3.py`` for ``1.0.3``) and may define:

- ``up(context)``: bring stored data from the previous version to this one.
- ``down(context)``: bring stored data back to this version from the next one.
- ``DESCRIPTION``: one-line summary used in logs.

Modules are discovered by
:class:`~ModelHub.migration.registry.DirectoryMigrationRegistry`; published
steps are append-only and must never be edited once released.
"""
