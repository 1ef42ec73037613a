"""Logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(debug: bool = False, console: Console | None = None) -> None:
    """Route all log records through a rich handler.

    Args:
        debug: Log at DEBUG instead of INFO.
        console: Console to write to (stderr by default).
    """
    level = logging.DEBUG if debug else logging.INFO
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        rich_tracebacks=True,
    )

    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.DEBUG if debug else logging.WARNING)
