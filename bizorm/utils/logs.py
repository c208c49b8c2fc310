"""
Logging setup for the ``bizorm`` logger hierarchy.
"""

from __future__ import annotations

import logging
from typing import Union

__all__ = ["LOG_FORMAT", "configure_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Union[int, str] = logging.WARNING) -> logging.Logger:
    """Attach a stream handler to the ``bizorm`` logger."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    logger = logging.getLogger("bizorm")
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
