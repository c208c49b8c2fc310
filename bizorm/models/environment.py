"""
Record-set layer protocols.

The record-set and method-dispatch machinery lives outside this package.
Models only need to recognise record set handles during conversion and to
forward ``create``/``search`` calls to an environment.
"""

from __future__ import annotations

from typing import Any, List, Protocol, runtime_checkable

__all__ = ["RecordSet", "RecordCollection", "MethodCaller", "Environment"]


@runtime_checkable
class RecordSet(Protocol):
    """Handle on an ordered set of records of one model."""

    def ids(self) -> List[int]:
        ...

    def collection(self) -> "RecordCollection":
        ...


@runtime_checkable
class RecordCollection(RecordSet, Protocol):
    def model_name(self) -> str:
        ...


class MethodCaller(Protocol):
    def call(self, method: str, *args: Any) -> Any:
        ...


@runtime_checkable
class Environment(Protocol):
    def pool(self, model_name: str) -> MethodCaller:
        ...
