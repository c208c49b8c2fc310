"""Naming helpers shared by models, fields and sequences."""

from __future__ import annotations

import re

__all__ = ["snake_case"]


def snake_case(name: str) -> str:
    """Convert a CamelCase identifier to snake_case.

    Idempotent for already snake_case input. Handles sequences of capitals
    (``HTTPServer`` -> ``http_server``).
    """
    if not name:
        return name
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return s2.lower()
