"""Process-wide logging for the hold service.

The sweeper runs on its own thread, so the record format carries the thread
name: eviction lines read ``hold-expiry-sweeper`` while request handling
reads the worker thread.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from hba_backend.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single stdout handler to the root logger.

    Later calls only adjust the level when one is passed explicitly.
    """
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        if level:
            root.setLevel(level.upper())
        return

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_handler)
    root.setLevel((level or get_settings().log_level).upper())


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
