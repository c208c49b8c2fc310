"""
bizorm security handles - per-model access-control list and record rules.

These are opaque containers attached to models and fields. Evaluating them
belongs to the access-control subsystem, not to this package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Dict, List, Optional


__all__ = ["Permission", "AccessControlList", "RecordRule", "RecordRuleRegistry"]


class Permission(IntFlag):
    """CRUD permission flags."""

    NONE = 0
    READ = 1
    WRITE = 2
    CREATE = 4
    UNLINK = 8
    ALL = READ | WRITE | CREATE | UNLINK


class AccessControlList:
    """Maps group identifiers to granted permissions."""

    def __init__(self) -> None:
        self._perms: Dict[str, Permission] = {}

    def __repr__(self) -> str:
        return f"<AccessControlList: {len(self._perms)} groups>"

    def add_permission(self, group: str, perm: Permission) -> None:
        self._perms[group] = self._perms.get(group, Permission.NONE) | perm

    def remove_permission(self, group: str, perm: Permission) -> None:
        remaining = self._perms.get(group, Permission.NONE) & ~perm
        if remaining:
            self._perms[group] = remaining
        else:
            self._perms.pop(group, None)

    def permissions(self, group: str) -> Permission:
        return self._perms.get(group, Permission.NONE)

    def groups(self) -> List[str]:
        return list(self._perms)


@dataclass
class RecordRule:
    """A named row-level restriction. ``condition`` is opaque here."""

    name: str
    condition: Any = None
    global_rule: bool = False
    group: Optional[str] = None
    perms: Permission = Permission.ALL


@dataclass
class RecordRuleRegistry:
    """Named record rules attached to one model."""

    rules: Dict[str, RecordRule] = field(default_factory=dict)

    def add_rule(self, rule: RecordRule) -> None:
        self.rules[rule.name] = rule

    def remove_rule(self, name: str) -> None:
        self.rules.pop(name, None)

    def get(self, name: str) -> Optional[RecordRule]:
        return self.rules.get(name)

    def all(self) -> List[RecordRule]:
        return list(self.rules.values())
