"""
bizorm row cursors - the storage side of row decoding.

A row cursor enumerates the column names of a result and scans the current
row positionally. SQL NULL must come back as ``None`` without raising.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Protocol, Sequence, runtime_checkable

from ..faults import RowScanFault

__all__ = ["RowCursor", "DBAPIRowCursor", "MappingRowCursor"]


@runtime_checkable
class RowCursor(Protocol):
    def columns(self) -> List[str]:
        ...

    def scan(self) -> Sequence[Any]:
        ...


class DBAPIRowCursor:
    """Adapts a PEP 249 cursor positioned on an executed query."""

    def __init__(self, cursor: Any):
        self._cursor = cursor

    def columns(self) -> List[str]:
        if self._cursor.description is None:
            raise RowScanFault("cursor has no result set")
        return [col[0] for col in self._cursor.description]

    def scan(self) -> Sequence[Any]:
        row = self._cursor.fetchone()
        if row is None:
            raise RowScanFault("no row available")
        return tuple(row)


class MappingRowCursor:
    """Exposes an already fetched dict row (column -> value) as a cursor."""

    def __init__(self, row: Mapping[str, Any]):
        self._row = row

    def columns(self) -> List[str]:
        return list(self._row.keys())

    def scan(self) -> Sequence[Any]:
        return tuple(self._row.values())
