"""
bizorm FieldMap - a record's values keyed by field name, json name or path.
"""

from __future__ import annotations

from typing import Any, Dict

__all__ = ["FieldMap"]


class FieldMap(Dict[str, Any]):
    """
    Mapping from field keys to values.

    Keys are field names (``Name``), json names (``name``) or dotted paths
    (``Company.Name``). Canonicalising them is the model's job, see
    ``Model.jsonize_field_map``.
    """

    def copy(self) -> FieldMap:
        return FieldMap(self)
