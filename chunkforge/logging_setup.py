"""Root logger configuration for the server and CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_HANDLER_NAME = "chunkforge-rich"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a Rich console handler on the root logger.

    Safe to call more than once; the handler is only added the first time,
    later calls just adjust the level.
    """
    root = logging.getLogger()
    root.setLevel(level if isinstance(level, int) else level.upper())

    if any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    root.addHandler(handler)
