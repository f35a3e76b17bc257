"""Logging setup, called once from the application lifespan."""

import logging
import sys
from typing import Optional

from .config import Settings, get_settings


# Noisy third-party loggers kept at WARNING regardless of the app level.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _parse_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))

    # uvicorn usually installs a handler; tests and scripts may not
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s - %(message)s"))
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured (level=%s)", settings.log_level)
