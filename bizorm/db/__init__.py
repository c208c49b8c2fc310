"""
bizorm DB - storage adapters.
"""

from .adapters import (
    AdapterCapabilities,
    DatabaseAdapter,
    PostgresAdapter,
    SQLiteAdapter,
    SequenceFault,
)

__all__ = [
    "AdapterCapabilities",
    "DatabaseAdapter",
    "PostgresAdapter",
    "SQLiteAdapter",
    "SequenceFault",
]
