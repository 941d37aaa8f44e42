"""Centralized logging helpers.

Keeps handler setup in one place and provides small helpers for structured
DEBUG traces so hot paths can skip building log payloads entirely.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_NAME = "versionspec-default"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the default stream handler on the root logger.

    Level precedence: explicit argument, then the VERSIONSPEC_LOG_LEVEL
    environment variable, then Constants.DEFAULT_LOG_LEVEL. Calling this more
    than once only updates the level.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or Constants.DEFAULT_LOG_LEVEL).upper()
    level_value = getattr(logging, level_name, None)
    if not isinstance(level_value, int):
        level_value = logging.INFO

    root = logging.getLogger()
    if not any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` payload, dropping fields that are None."""
    return {k: v for k, v in fields.items() if v is not None}


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds; measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)
