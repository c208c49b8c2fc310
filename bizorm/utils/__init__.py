"""
bizorm utilities - naming helpers, logging setup and synchronization primitives.
"""

from .strings import snake_case
from .locks import ReadWriteLock
from .logs import LOG_FORMAT, configure_logging

__all__ = ["snake_case", "ReadWriteLock", "LOG_FORMAT", "configure_logging"]
