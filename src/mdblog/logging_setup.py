"""Logging configuration: a single managed Rich handler on stderr"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


LOG_LEVEL_ENV = "MDBLOG_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"

console = Console(stderr=True)


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv(LOG_LEVEL_ENV, DEFAULT_LEVEL)).upper()
    return getattr(logging, name, logging.WARNING)


def configure_logging(level: str | None = None) -> None:
    """Install the Rich handler once on the root logger and apply the level.

    Repeated calls only adjust the level, so the CLI callback can run for
    every invocation inside one process (e.g. under CliRunner).
    """
    root = logging.getLogger()
    handler = next((h for h in root.handlers if getattr(h, "_mdblog_managed", False)), None)
    if handler is None:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._mdblog_managed = True
        root.addHandler(handler)

    resolved = _resolve_level(level)
    root.setLevel(resolved)
    handler.setLevel(resolved)
