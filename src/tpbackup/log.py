"""Logging setup.

Usage:
    import logging

    logger = logging.getLogger(__name__)
    logger.info("backing up %d resources", n)

`setup_logging` is called once by the CLI. Records go to stderr through a
`rich` handler so they never mix with documents streamed to stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LEVEL = "WARNING"


def setup_logging(level: str = DEFAULT_LEVEL, console: Console | None = None) -> None:
    """Configure the ``tpbackup`` logger hierarchy.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Console to render on; defaults to a stderr console
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=numeric <= logging.DEBUG,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger("tpbackup")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric)
    root.propagate = False

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(numeric, logging.WARNING))
