"""
Locate a ModelRegistry from a ``module[:attribute]`` target.
"""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from ..models import ModelRegistry

__all__ = ["RegistryLoadError", "load_registry"]

DEFAULT_ATTRIBUTE = "registry"


class RegistryLoadError(Exception):
    """The target does not expose a ModelRegistry."""


def _import_target(module_ref: str) -> ModuleType:
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    if module_ref.endswith(".py"):
        path = Path(module_ref).resolve()
        if not path.is_file():
            raise RegistryLoadError(f"File not found: {module_ref}")
        module_name = f"_bizorm_cli_{path.stem}_{abs(hash(str(path)))}"
        spec = importlib.util.spec_from_file_location(module_name, str(path))
        if spec is None or spec.loader is None:
            raise RegistryLoadError(f"Cannot import {module_ref}")
        mod = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(mod)
        return mod

    try:
        return importlib.import_module(module_ref)
    except ModuleNotFoundError as exc:
        raise RegistryLoadError(f"Cannot import '{module_ref}': {exc}") from exc


def load_registry(target: str) -> ModelRegistry:
    """
    Import ``target`` and return its registry.

    ``target`` is ``module``, ``module:attribute`` or a path to a ``.py``
    file. The attribute defaults to ``registry``; a callable attribute is
    called without arguments.
    """
    module_ref, _, attr = target.partition(":")
    mod = _import_target(module_ref)
    attr = attr or DEFAULT_ATTRIBUTE
    if not hasattr(mod, attr):
        raise RegistryLoadError(f"'{module_ref}' has no attribute '{attr}'")
    obj = getattr(mod, attr)
    if callable(obj) and not isinstance(obj, ModelRegistry):
        obj = obj()
    if not isinstance(obj, ModelRegistry):
        raise RegistryLoadError(
            f"'{module_ref}:{attr}' is a {type(obj).__name__}, not a ModelRegistry"
        )
    return obj
