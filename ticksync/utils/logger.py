"""Shared logger setup for ticksync.

Usage:
    from ticksync.utils.logger import get_logger
    log = get_logger(__name__)
    log.info("pulled %d tasks", count)

The level defaults to ``TICKSYNC_LOG_LEVEL`` (``WARNING`` when unset) so the
console output of ``pull`` / ``push`` stays limited to notifications unless the
user asks for more with ``--verbose``.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Union

from rich.logging import RichHandler

_HANDLER_NAME = "ticksync-rich"
_FORMAT = "%(message)s"  # RichHandler renders time and level itself


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv("TICKSYNC_LOG_LEVEL", "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Attach the rich handler to the ``ticksync`` logger once; later calls only adjust the level."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
        level = _level_from_env()

    root = logging.getLogger("ticksync")
    root.setLevel(level)
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = RichHandler(rich_tracebacks=True, markup=False, show_path=False)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)


def get_logger(name: str = "ticksync") -> logging.Logger:
    """Return a module-level logger below the ``ticksync`` hierarchy."""
    if not logging.getLogger("ticksync").handlers:
        configure_logging()
    return logging.getLogger(name)
