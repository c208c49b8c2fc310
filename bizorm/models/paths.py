"""
bizorm Path Resolver - dotted field paths across relation chains.

Object-model paths separate segments with ``ExprSep`` (``partner.company.name``).
Storage columns of joined tables separate them with ``SqlSep``
(``partner__company__name``). Paths may mix field names and json names.
"""

from __future__ import annotations

import logging
from typing import List, TYPE_CHECKING

from ..faults import NotARelationFault, raise_fault

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger("bizorm.models.paths")

__all__ = [
    "ExprSep",
    "SqlSep",
    "split_path",
    "jsonize_expr",
    "jsonize_path",
    "sql_column_to_path",
]

ExprSep = "."
SqlSep = "__"


def split_path(path: str) -> List[str]:
    return path.split(ExprSep)


def sql_column_to_path(column: str) -> str:
    """Translate a storage column name into an object-model path."""
    return column.replace(SqlSep, ExprSep)


def jsonize_expr(model: Model, exprs: List[str]) -> List[str]:
    """
    Return ``exprs`` with every segment replaced by its json name.

    Fatal if a segment is not a field of the model reached at that point,
    or if a non last segment is not a relation.
    """
    if not exprs:
        return []
    fi = model.fields.must_get(exprs[0])
    res = [fi.json]
    if len(exprs) > 1:
        if fi.related_model is None:
            raise_fault(logger, NotARelationFault(model.name, exprs[0]))
        res.extend(jsonize_expr(fi.related_model, exprs[1:]))
    return res


def jsonize_path(model: Model, path: str) -> str:
    """Return the json form of the dotted ``path`` starting at ``model``."""
    return ExprSep.join(jsonize_expr(model, split_path(path)))
