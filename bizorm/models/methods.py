"""
bizorm Model Methods - named, overridable behaviour units.

A ``Method`` is a stack of layers: ``extend`` pushes a new implementation on
top of the previous ones. Dispatching calls through the stack belongs to the
record-set layer; this module only stores and resolves them.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from ..faults import MethodNotFoundFault, raise_fault

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger("bizorm.models.methods")

__all__ = ["Method", "MethodsCollection"]


class Method:
    """A named method of a model, made of ordered implementation layers."""

    def __init__(self, name: str, fnct: Callable, *, doc: str = "", model: Optional[Model] = None):
        self.name = name
        self.doc = doc or (fnct.__doc__ or "").strip()
        self.model = model
        self.layers: List[Callable] = [fnct]

    def __repr__(self) -> str:
        owner = self.model.name if self.model is not None else "?"
        return f"<Method: {owner}.{self.name} ({len(self.layers)} layers)>"

    def extend(self, fnct: Callable) -> Method:
        """Override this method with ``fnct``, keeping previous layers."""
        self.layers.append(fnct)
        return self

    @property
    def top_layer(self) -> Callable:
        return self.layers[-1]

    @property
    def underlying(self) -> Callable:
        """The first declared implementation."""
        return self.layers[0]

    def super_layer(self, fnct: Callable) -> Optional[Callable]:
        """The layer right below ``fnct``, or None for the bottom one."""
        idx = self.layers.index(fnct)
        return self.layers[idx - 1] if idx > 0 else None


class MethodsCollection:
    """
    Keyed container of the methods of one model.

    Same resolution rules as fields: own declarations first, then mixins in
    declaration order.
    """

    def __init__(self) -> None:
        self._registry: Dict[str, Method] = {}
        self.model: Optional[Model] = None

    def __contains__(self, name: str) -> bool:
        return self.get(name)[1]

    def add(self, method: Method) -> None:
        method.model = self.model
        self._registry[method.name] = method

    def get(self, name: str) -> Tuple[Optional[Method], bool]:
        meth = self._lookup(name, set())
        return meth, meth is not None

    def must_get(self, name: str) -> Method:
        meth = self._lookup(name, set())
        if meth is None:
            model_name = self.model.name if self.model is not None else "<unbound>"
            raise_fault(logger, MethodNotFoundFault(model_name, name))
        return meth

    def own(self) -> List[Method]:
        return list(self._registry.values())

    def names(self) -> List[str]:
        res: Dict[str, None] = {}
        self._collect_names(res, set())
        return list(res)

    def _lookup(self, name: str, visited: Set[int]) -> Optional[Method]:
        visited.add(id(self))
        if name in self._registry:
            return self._registry[name]
        for mixin in (self.model.mixins if self.model is not None else []):
            if id(mixin.methods) in visited:
                continue
            meth = mixin.methods._lookup(name, visited)
            if meth is not None:
                return meth
        return None

    def _collect_names(self, res: Dict[str, None], visited: Set[int]) -> None:
        visited.add(id(self))
        for name in self._registry:
            res.setdefault(name)
        for mixin in (self.model.mixins if self.model is not None else []):
            if id(mixin.methods) not in visited:
                mixin.methods._collect_names(res, visited)
