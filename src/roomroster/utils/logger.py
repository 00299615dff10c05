"""Logging setup shared by every roomroster module.

Modules only ask for a named logger. Handlers are installed by the
application entry point (``roomroster.cli``) through ``configure_logging``.
"""

import logging
import sys
from typing import Optional

from roomroster import config

_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None, force: bool = False) -> None:
    """Configure process-wide logging once.

    Log records go to stderr so they never mix with printed reports.

    Args:
        level: Level name (e.g. "DEBUG"). Defaults to ``config.LOG_LEVEL``.
        force: Reconfigure even if logging was already set up (the CLI
            uses this to apply ``--log-level``).
    """
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED and not force:
        return

    resolved_level = (level or config.LOG_LEVEL).upper()

    logging.basicConfig(
        level=resolved_level,
        format=config.LOG_FORMAT,
        stream=sys.stderr,
        force=force,
    )
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for the requested module."""
    return logging.getLogger(name)
