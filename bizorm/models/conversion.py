"""
bizorm value conversion table.

Plain, representation-preserving conversions from a storage value type to a
field's ``python_type``. Lookups use the exact type of the incoming value so
that ``bool`` never converts as an ``int``. Values without a registered
conversion are left unchanged.
"""

from __future__ import annotations

import decimal
from typing import Any, Callable, Dict, Tuple

__all__ = ["register_conversion", "convert_value"]

Converter = Callable[[Any], Any]

_CONVERSIONS: Dict[Tuple[type, type], Converter] = {}


def register_conversion(source: type, target: type, fn: Converter) -> None:
    """Declare how values of type ``source`` become ``target`` values."""
    _CONVERSIONS[(source, target)] = fn


def convert_value(value: Any, target: type) -> Any:
    """Convert ``value`` to ``target`` if a conversion is registered."""
    fn = _CONVERSIONS.get((type(value), target))
    if fn is None:
        return value
    return fn(value)


register_conversion(int, float, float)
register_conversion(float, int, int)
register_conversion(decimal.Decimal, float, float)
register_conversion(decimal.Decimal, int, int)
register_conversion(bytes, str, lambda v: v.decode("utf-8"))
register_conversion(bytearray, str, lambda v: bytes(v).decode("utf-8"))
register_conversion(memoryview, str, lambda v: v.tobytes().decode("utf-8"))
register_conversion(str, bytes, lambda v: v.encode("utf-8"))
register_conversion(bytearray, bytes, bytes)
register_conversion(memoryview, bytes, lambda v: v.tobytes())
register_conversion(tuple, list, list)
