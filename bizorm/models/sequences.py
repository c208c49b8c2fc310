"""
bizorm Sequences - named, storage backed counters.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from ..utils import snake_case

if TYPE_CHECKING:
    from .registry import ModelRegistry

__all__ = ["Sequence", "sequence_json_name"]


def sequence_json_name(name: str) -> str:
    """Storage name of the sequence ``name``: ``InvoiceNumber`` -> ``invoice_number_manseq``."""
    return f"{snake_case(name)}_manseq"


class Sequence:
    """
    A named counter living in storage.

    Every ``next_value`` call goes to the storage adapter of the owning
    registry. Values are never cached.
    """

    def __init__(self, name: str, *, json: Optional[str] = None, registry: Optional[ModelRegistry] = None):
        self.name = name
        self.json = json or sequence_json_name(name)
        self.registry = registry

    def __repr__(self) -> str:
        return f"<Sequence: {self.name} ({self.json})>"

    def next_value(self) -> int:
        """Return the next value of this sequence, from storage."""
        return self.registry.adapter().next_sequence_value(self.json)
