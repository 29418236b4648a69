"""Diagnostic logging setup.

Everything goes to stderr. stdout is reserved for protocol output and
must never receive a log line.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVELS: dict[str, int] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

stderr_console = Console(stderr=True)


def parse_level(name: str) -> int:
    """Map an ``MCP_LOG_LEVEL`` value onto a :mod:`logging` level."""
    try:
        return LOG_LEVELS[name.strip().lower()]
    except KeyError:
        msg = f"Unknown log level: {name!r} (expected one of {', '.join(LOG_LEVELS)})"
        raise ValueError(msg) from None


def configure_logging(level: int, *, logger_name: str = "sales_intel") -> logging.Logger:
    """Attach a single stderr :class:`RichHandler` to the package logger."""
    root = logging.getLogger(logger_name)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = RichHandler(console=stderr_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root
