"""Operator confirmation before a migration run."""

from __future__ import annotations

from typing import Callable

import click

PROMPT = (
    "Are you sure you want to migrate database versions? "
    "Press any key to continue. Press ^C to cancel."
)


class ConfirmationGate:
    """Blocks until the operator presses a key, unless skipped.

    Args:
        read_key: Callable blocking for one unit of input. Defaults to
            :func:`click.getchar`; Ctrl-C surfaces as ``KeyboardInterrupt``
            or ``click.Abort``.
        echo: Output function for the prompt.
    """

    def __init__(
        self,
        read_key: Callable[[], object] | None = None,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        self._read_key = read_key or click.getchar
        self._echo = echo or click.echo

    def confirm(self, skip: bool = False) -> None:
        if skip:
            return
        self._echo(PROMPT)
        self._read_key()
