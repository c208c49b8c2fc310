"""
bizorm DB - storage adapters for sequences.

An adapter wraps an open PEP 249 connection and implements the few storage
operations the metadata core needs. Adapters are registered per driver
name on a ``ModelRegistry``; the registry configuration selects the active
one:

    registry.register_adapter("sqlite", SQLiteAdapter(sqlite3.connect(":memory:")))
    seq = registry.new_sequence("InvoiceNumber")
    seq.next_value()
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..faults import DataFault

logger = logging.getLogger("bizorm.db.adapters")

__all__ = [
    "AdapterCapabilities",
    "DatabaseAdapter",
    "PostgresAdapter",
    "SQLiteAdapter",
    "SequenceFault",
]

_IDENT_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class SequenceFault(DataFault):
    """A sequence operation failed in storage."""

    def __init__(self, sequence: str, reason: str, **kwargs):
        super().__init__(
            code="SEQUENCE_FAILED",
            message=f"Sequence '{sequence}': {reason}",
            metadata={"sequence": sequence, "reason": reason, **kwargs.get("metadata", {})},
        )


@dataclass
class AdapterCapabilities:
    """Describes what a specific backend supports."""

    native_sequences: bool = False
    param_style: str = "qmark"  # qmark (?) | format (%s)
    name: str = "base"


class DatabaseAdapter(ABC):
    """
    Abstract storage adapter.

    Holds a PEP 249 connection opened by the caller. All calls block the
    calling thread.
    """

    capabilities: AdapterCapabilities = AdapterCapabilities()

    def __init__(self, connection: Any):
        self.connection = connection

    @property
    def name(self) -> str:
        return self.capabilities.name

    def _execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> int:
        """Run a write statement and return its row count."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, tuple(params or ()))
            return cursor.rowcount
        finally:
            cursor.close()

    def _fetch_value(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, tuple(params or ()))
            row = cursor.fetchone()
        finally:
            cursor.close()
        return row[0] if row is not None else None

    @staticmethod
    def _check_identifier(name: str) -> str:
        if not _IDENT_RE.match(name):
            raise SequenceFault(name, "invalid identifier")
        return name

    @abstractmethod
    def create_sequence(self, name: str, start: int = 1, increment: int = 1) -> None:
        """Create the sequence ``name`` in storage."""
        ...

    @abstractmethod
    def drop_sequence(self, name: str) -> None:
        """Drop the sequence ``name`` from storage."""
        ...

    @abstractmethod
    def sequence_exists(self, name: str) -> bool:
        ...

    @abstractmethod
    def next_sequence_value(self, name: str) -> int:
        """Increment the sequence ``name`` and return its new value."""
        ...


class PostgresAdapter(DatabaseAdapter):
    """PostgreSQL adapter, native ``SEQUENCE`` objects."""

    capabilities = AdapterCapabilities(native_sequences=True, param_style="format", name="postgres")

    def create_sequence(self, name: str, start: int = 1, increment: int = 1) -> None:
        ident = self._check_identifier(name)
        self._execute(
            f'CREATE SEQUENCE IF NOT EXISTS "{ident}" INCREMENT BY {int(increment)} START WITH {int(start)}'
        )
        logger.debug("Created sequence %s", ident)

    def drop_sequence(self, name: str) -> None:
        ident = self._check_identifier(name)
        self._execute(f'DROP SEQUENCE IF EXISTS "{ident}"')
        logger.debug("Dropped sequence %s", ident)

    def sequence_exists(self, name: str) -> bool:
        count = self._fetch_value(
            "SELECT COUNT(*) FROM pg_class WHERE relkind = 'S' AND relname = %s",
            (name,),
        )
        return bool(count)

    def next_sequence_value(self, name: str) -> int:
        value = self._fetch_value("SELECT nextval(%s)", (name,))
        if value is None:
            raise SequenceFault(name, "nextval returned no value")
        return int(value)


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite adapter.

    SQLite has no sequence objects: every sequence is one row of a
    ``bizorm_sequences`` counter table.
    """

    capabilities = AdapterCapabilities(native_sequences=False, param_style="qmark", name="sqlite")

    TABLE = "bizorm_sequences"

    def __init__(self, connection: Any):
        super().__init__(connection)
        self._execute(
            f"CREATE TABLE IF NOT EXISTS {self.TABLE} ("
            "name TEXT PRIMARY KEY, "
            "value INTEGER NOT NULL, "
            "increment INTEGER NOT NULL DEFAULT 1)"
        )
        self.connection.commit()

    def create_sequence(self, name: str, start: int = 1, increment: int = 1) -> None:
        self._execute(
            f"INSERT OR IGNORE INTO {self.TABLE} (name, value, increment) VALUES (?, ?, ?)",
            (name, int(start) - int(increment), int(increment)),
        )
        self.connection.commit()
        logger.debug("Created sequence %s", name)

    def drop_sequence(self, name: str) -> None:
        self._execute(f"DELETE FROM {self.TABLE} WHERE name = ?", (name,))
        self.connection.commit()
        logger.debug("Dropped sequence %s", name)

    def sequence_exists(self, name: str) -> bool:
        return self._fetch_value(f"SELECT 1 FROM {self.TABLE} WHERE name = ?", (name,)) is not None

    def next_sequence_value(self, name: str) -> int:
        updated = self._execute(
            f"UPDATE {self.TABLE} SET value = value + increment WHERE name = ?",
            (name,),
        )
        if updated == 0:
            self.connection.rollback()
            raise SequenceFault(name, "sequence does not exist")
        value = self._fetch_value(f"SELECT value FROM {self.TABLE} WHERE name = ?", (name,))
        self.connection.commit()
        return int(value)
