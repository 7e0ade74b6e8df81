"""Diagnostic logging for pool selection.

Gated by the DEBUG environment variable, the same convention the `debug`
package uses in the Node ecosystem: DEBUG=* enables everything, otherwise
DEBUG is a comma-separated list of enabled namespaces.

The flag is read on every call, so it can be toggled at runtime. When
disabled, log() returns before touching the logger.
"""

import json
import logging
import os
import sys
from collections.abc import Mapping

DEBUG_KEY = "github-app-pool"
LOGGER_NAME = "app_pool.debug"


class TaggedFormatter(logging.Formatter):
    """Formats records as `[github-app-pool] message {json fields}`."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{DEBUG_KEY}] {record.getMessage()}"
        # Merge any extra fields passed via `extra={}` kwarg
        if hasattr(record, "pool_data") and record.pool_data:
            line = f"{line} {json.dumps(record.pool_data, default=str)}"
        return line


def is_debug_enabled(env: Mapping[str, str] | None = None) -> bool:
    """Check DEBUG in `env` (defaults to the live process environment)."""
    if env is None:
        env = os.environ
    debug = env.get("DEBUG", "")
    if not debug:
        return False
    if debug.strip() == "*":
        return True
    return DEBUG_KEY in [part.strip() for part in debug.split(",")]


def setup_logging() -> None:
    """Attach a single tagged stdout handler to the diagnostic logger."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(TaggedFormatter())

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers[:] = [handler]
    # DEBUG env gates output, not the log level
    logger.setLevel(logging.DEBUG)
    logger.propagate = False


def get_debug_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def log(message: str, env: Mapping[str, str] | None = None, **fields) -> None:
    """Emit a diagnostic line if DEBUG enables this package."""
    if not is_debug_enabled(env):
        return

    logger = get_debug_logger()
    if not logger.handlers:
        setup_logging()
    logger.debug(message, extra={"pool_data": fields})
