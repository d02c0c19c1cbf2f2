"""Logging setup for the arc-ask CLI.

Logging stays unconfigured unless --debug is given; user-facing messages go
through the stderr console instead.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "requests", "urllib3", "markdown_it")

_console: Console | None = None


def get_console() -> Console:
    """Shared stderr console; stdout is reserved for the answer."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def setup_logging(debug: bool = False) -> None:
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s - %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=get_console(), rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # Set higher levels for noisy libraries only when debugging
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
