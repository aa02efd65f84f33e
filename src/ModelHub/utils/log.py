"""ModelHub logging utilities.

Every CLI run logs to the console and, optionally, to its own file under
``<log_dir>/<action>/``. The file keeps DEBUG records, so the traceback of a
failed migration step can be read after the console has moved on.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Final


_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelabbr)s] %(message)s"
_DATE_FORMAT: Final[str] = "%m-%d %H:%M:%S"


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("ModelHub")


def run_log_path(log_dir: str | Path, action: str, *, now: datetime | None = None) -> Path:
    """Return the file a run of ``action`` logs to.

    Names look like ``log/migrate/migrate-20261018-142501-4711.log``; the
    process id keeps two runs started in the same second apart.
    """
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return Path(log_dir or "log") / action / f"{action}-{stamp}-{os.getpid()}.log"


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = True,
    log_dir: str = "log",
) -> Path | None:
    """Configure the ModelHub logger for one CLI run.

    Uses format: mm-dd HH:MM:SS [<LVL>] <message>
    where LVL is one of: DEBG/INFO/WARN/ERRO.

    Args:
        level: Console level (e.g., INFO, DEBUG). The console never shows
            records below INFO.
        action: CLI action name; required for a run log file.
        log_to_file: Whether to mirror logs to a run log file.
        log_dir: Base directory for run log files.

    Returns:
        Path of the run log file, or None when logging to console only.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _AbbrevLevelFormatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(max(logging.INFO, resolved_level))
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    log_path = None
    if log_to_file and action:
        log_path = run_log_path(log_dir, action)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        run_file = logging.FileHandler(log_path, encoding="utf-8")
        run_file.setLevel(logging.DEBUG)
        run_file.setFormatter(formatter)
        handlers.append(run_file)

    # Repeated runs in one process (tests, CliRunner) must not leak open files.
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if log_path else resolved_level)
    log.propagate = False
    return log_path
