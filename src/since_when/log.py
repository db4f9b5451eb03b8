"""Logging setup for since-when."""
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "since-when"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Route the since_when loggers through a RichHandler on stderr.

    Safe to call more than once; the handler is only installed the first time.
    """
    root = logging.getLogger("since_when")
    numeric = logging.getLevelName(level.upper())
    root.setLevel(numeric if isinstance(numeric, int) else logging.WARNING)
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    return root
