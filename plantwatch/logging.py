"""Logging setup shared by the monitor and the web server."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s - %(message)s"

_NAMESPACE = "plantwatch"
_configured = False


def configure(level: int | str | None = None) -> None:
    """Attach a stderr handler to the plantwatch and uvicorn loggers.

    The level defaults to the LOG_LEVEL setting. Only the first call has
    any effect.
    """
    global _configured
    if _configured:
        return

    if level is None:
        from plantwatch.lib.config import get_settings

        level = get_settings().log_level

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    app_logger = logging.getLogger(_NAMESPACE)
    app_logger.setLevel(level)
    app_logger.addHandler(handler)

    # Request logs from the web server share the same format
    uvicorn_logger = logging.getLogger("uvicorn")
    uvicorn_logger.handlers.clear()
    uvicorn_logger.addHandler(handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger ``plantwatch.<name>``."""
    return logging.getLogger(f"{_NAMESPACE}.{name}")
