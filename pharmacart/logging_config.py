"""
Logging — one stdout handler on the root logger.

    from pharmacart.logging_config import setup_logging

    setup_logging()                  # LOG_LEVEL / LOG_FORMAT from settings
    setup_logging("DEBUG")           # explicit level

Modules log through ``logging.getLogger(__name__)``; this only decides
where records go. Calling it again replaces the handler instead of
stacking a second one.
"""

from __future__ import annotations

import logging
import sys

from pharmacart.config import settings

# Transport libraries log every request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore")


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str | None = None, format_string: str | None = None) -> None:
    level_name = level or settings.log_level
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or settings.log_format))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(_resolve_level(level_name))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured at %s", level_name)


__all__ = ("QUIET_LOGGERS", "setup_logging")
