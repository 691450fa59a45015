"""
Logging setup for flowmail

All loggers live under the "flowmail" namespace and write to stderr.
stdout is reserved for the plugin handshake line read by the runner.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "flowmail"

_configured = False


def resolve_level() -> int:
    level_name = os.getenv("FLOWMAIL_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level: int | None = None) -> None:
    """Attach the stderr handler to the flowmail root logger once."""
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if level is not None:
        root.setLevel(level)

    if _configured:
        return

    if level is None:
        root.setLevel(resolve_level())

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a flowmail module.

    Args:
        name: Usually __name__ of the calling module

    Returns:
        Logger under the flowmail namespace
    """
    configure_logging()
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = ["configure_logging", "get_logger", "resolve_level"]
