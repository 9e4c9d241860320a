"""Logging setup for the CLI - Rich console output plus an optional log file."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: LoggingConfig, console: Console | None = None) -> None:
    """
    Configure the root logger once per process.

    Args:
        config: Logging section of the app config
        console: Console shared with the CLI so log lines and output interleave
    """
    level = getattr(logging, str(config.level).upper(), logging.INFO)

    handlers: list[logging.Handler] = [
        RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=False)
    ]
    if config.file:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)
