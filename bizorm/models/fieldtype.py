"""
bizorm Field Types - the type tag carried by every field descriptor.

The value converter dispatches on these tags rather than on live type
introspection: each tag knows its in-memory representation (``python_type``)
and its zero value.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any


__all__ = ["FieldType"]


class FieldType(str, Enum):
    """Kind of a business field."""

    BINARY = "binary"
    BOOLEAN = "boolean"
    CHAR = "char"
    DATE = "date"
    DATETIME = "datetime"
    FLOAT = "float"
    HTML = "html"
    INTEGER = "integer"
    JSON = "json"
    MANY2MANY = "many2many"
    MANY2ONE = "many2one"
    ONE2MANY = "one2many"
    ONE2ONE = "one2one"
    REV2ONE = "rev2one"
    SELECTION = "selection"
    TEXT = "text"

    def is_relation_type(self) -> bool:
        """True for every field type pointing to another model."""
        return self in _RELATION_TYPES

    def is_fk_relation_type(self) -> bool:
        """True for relations stored as a foreign key column on this table."""
        return self in (FieldType.MANY2ONE, FieldType.ONE2ONE)

    def is_2many_relation_type(self) -> bool:
        """True for relations holding a list of identifiers."""
        return self in (FieldType.ONE2MANY, FieldType.MANY2MANY)

    def is_non_stored(self) -> bool:
        """True for relations that have no column on this table."""
        return self in (FieldType.ONE2MANY, FieldType.REV2ONE)

    @property
    def python_type(self) -> type:
        """In-memory representation of values of this type."""
        return _PYTHON_TYPES[self]

    def zero_value(self) -> Any:
        """Value substituted for NULL. Lists are fresh on every call."""
        if self.is_2many_relation_type():
            return []
        return _ZERO_VALUES.get(self)


_RELATION_TYPES = frozenset({
    FieldType.MANY2MANY,
    FieldType.MANY2ONE,
    FieldType.ONE2MANY,
    FieldType.ONE2ONE,
    FieldType.REV2ONE,
})

_PYTHON_TYPES = {
    FieldType.BINARY: bytes,
    FieldType.BOOLEAN: bool,
    FieldType.CHAR: str,
    FieldType.DATE: datetime.date,
    FieldType.DATETIME: datetime.datetime,
    FieldType.FLOAT: float,
    FieldType.HTML: str,
    FieldType.INTEGER: int,
    FieldType.JSON: object,
    FieldType.MANY2MANY: list,
    FieldType.MANY2ONE: int,
    FieldType.ONE2MANY: list,
    FieldType.ONE2ONE: int,
    FieldType.REV2ONE: int,
    FieldType.SELECTION: str,
    FieldType.TEXT: str,
}

# DATE, DATETIME and JSON have no meaningful zero and stay None.
_ZERO_VALUES = {
    FieldType.BINARY: b"",
    FieldType.BOOLEAN: False,
    FieldType.CHAR: "",
    FieldType.FLOAT: 0.0,
    FieldType.HTML: "",
    FieldType.INTEGER: 0,
    FieldType.MANY2ONE: 0,
    FieldType.ONE2ONE: 0,
    FieldType.REV2ONE: 0,
    FieldType.SELECTION: "",
    FieldType.TEXT: "",
}
