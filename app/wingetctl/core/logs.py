"""Logging configuration for a wingetctl run.

Library modules only create module-level loggers; handlers are attached
here, once, by the CLI entry point.
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from wingetctl.core.theme import get_theme

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Handlers installed by configure_logging, removed on reconfiguration
_installed_handlers: list[logging.Handler] = []


def configure_logging(level: str | int = "INFO", log_file: Path | None = None) -> None:
    """Attach console and file handlers to the root logger.

    Calling this again replaces the handlers from the previous call.

    Args:
        level: Logging level name or number.
        log_file: Optional file to append plain-text log records to.

    Raises:
        OSError: If the log file cannot be opened.
    """
    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    console_handler = RichHandler(
        console=Console(theme=get_theme(), stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    _installed_handlers.append(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        root.addHandler(handler)
    root.setLevel(level)
