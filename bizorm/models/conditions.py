"""
bizorm Conditions - composable search conditions rooted at a model.

Conditions are built field by field and are never mutated once built:
every operation returns a new ``Condition``.

Usage:
    cond = partner.field("Name").ilike("john").and_().field("Company.Name").equals("ACME")
    cond = cond | partner.field("Active").equals(False)
    cond = ~cond

    cond.serialize()
    # ['!', '|', '&', ('Name', 'ilike', 'john'), ('Company.Name', '=', 'ACME'),
    #  ('Active', '=', False)]
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from .paths import ExprSep, split_path

__all__ = ["Operator", "Predicate", "Condition", "ConditionStart", "ConditionField"]


class Operator(str, Enum):
    """Comparison operators of predicates."""

    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER = ">"
    GREATER_OR_EQUAL = ">="
    LOWER = "<"
    LOWER_OR_EQUAL = "<="
    LIKE = "=like"
    NOT_LIKE = "not =like"
    ILIKE = "=ilike"
    NOT_ILIKE = "not =ilike"
    CONTAINS = "like"
    NOT_CONTAINS = "not like"
    ICONTAINS = "ilike"
    NOT_ICONTAINS = "not ilike"
    IN = "in"
    NOT_IN = "not in"
    CHILD_OF = "child_of"

    def is_negative(self) -> bool:
        return self in (
            Operator.NOT_EQUALS,
            Operator.NOT_LIKE,
            Operator.NOT_ILIKE,
            Operator.NOT_CONTAINS,
            Operator.NOT_ICONTAINS,
            Operator.NOT_IN,
        )


@dataclass(frozen=True)
class Predicate:
    """
    One term of a condition.

    Either a leaf comparison (``exprs``, ``operator``, ``arg``) or a nested
    group (``cond``). ``is_or`` joins this term to the previous ones with OR
    instead of AND; ``is_not`` negates the term.
    """

    exprs: Tuple[str, ...] = ()
    operator: Optional[Operator] = None
    arg: Any = None
    is_or: bool = False
    is_not: bool = False
    cond: Optional[Condition] = None

    @property
    def path(self) -> str:
        return ExprSep.join(self.exprs)

    def prefixed(self, exprs: Sequence[str]) -> Predicate:
        if self.cond is not None:
            return replace(self, cond=self.cond.prefixed(ExprSep.join(exprs)))
        return replace(self, exprs=tuple(exprs) + self.exprs)


@dataclass(frozen=True)
class Condition:
    """An ordered list of predicates, evaluated left to right."""

    predicates: Tuple[Predicate, ...] = ()

    def __repr__(self) -> str:
        return f"Condition({self.serialize()!r})"

    def is_empty(self) -> bool:
        return not self.predicates

    def _with(self, predicate: Predicate) -> Condition:
        return Condition(self.predicates + (predicate,))

    # ── Chaining ─────────────────────────────────────────────────────

    def and_(self) -> ConditionStart:
        return ConditionStart(self)

    def or_(self) -> ConditionStart:
        return ConditionStart(self, is_or=True)

    def and_not(self) -> ConditionStart:
        return ConditionStart(self, is_not=True)

    def or_not(self) -> ConditionStart:
        return ConditionStart(self, is_or=True, is_not=True)

    def and_cond(self, other: Condition) -> Condition:
        return self._group(other)

    def or_cond(self, other: Condition) -> Condition:
        return self._group(other, is_or=True)

    def and_not_cond(self, other: Condition) -> Condition:
        return self._group(other, is_not=True)

    def or_not_cond(self, other: Condition) -> Condition:
        return self._group(other, is_or=True, is_not=True)

    def _group(self, other: Condition, *, is_or: bool = False, is_not: bool = False) -> Condition:
        if other.is_empty():
            return self
        return self._with(Predicate(cond=other, is_or=is_or, is_not=is_not))

    def __and__(self, other: Condition) -> Condition:
        return self.and_cond(other)

    def __or__(self, other: Condition) -> Condition:
        return self.or_cond(other)

    def __invert__(self) -> Condition:
        return Condition().and_not_cond(self)

    # ── Rewriting ────────────────────────────────────────────────────

    def prefixed(self, field: str) -> Condition:
        """
        Return a copy of this condition with ``field`` prepended to every
        predicate path, nested groups included.
        """
        exprs = split_path(field)
        return Condition(tuple(p.prefixed(exprs) for p in self.predicates))

    def serialize(self) -> List[Any]:
        """Serialize to a prefix-notation domain list."""
        res: List[Any] = []
        for p in self.predicates:
            if p.cond is not None:
                term = p.cond.serialize()
            else:
                term = [(p.path, p.operator.value, p.arg)]
            if not term:
                continue
            if p.is_not:
                term = ["!"] + term
            if res:
                res = ["|" if p.is_or else "&"] + res + term
            else:
                res = term
        return res


class ConditionStart:
    """A condition waiting for its next predicate's field."""

    def __init__(self, cond: Optional[Condition] = None, *, is_or: bool = False, is_not: bool = False):
        self.cond = cond if cond is not None else Condition()
        self.is_or = is_or
        self.is_not = is_not

    def field(self, name: str) -> ConditionField:
        return ConditionField(split_path(name), start=self)


class ConditionField:
    """A field path of a condition being built, awaiting its operator."""

    def __init__(self, exprs: Sequence[str], *, start: Optional[ConditionStart] = None):
        self.exprs: Tuple[str, ...] = tuple(exprs)
        self.start = start if start is not None else ConditionStart()

    def __repr__(self) -> str:
        return f"<ConditionField: {ExprSep.join(self.exprs)}>"

    def field(self, name: str) -> ConditionField:
        """Walk one or more relation segments further."""
        return ConditionField(self.exprs + tuple(split_path(name)), start=self.start)

    def _add(self, operator: Operator, arg: Any) -> Condition:
        return self.start.cond._with(Predicate(
            exprs=self.exprs,
            operator=operator,
            arg=arg,
            is_or=self.start.is_or,
            is_not=self.start.is_not,
        ))

    def equals(self, arg: Any) -> Condition:
        return self._add(Operator.EQUALS, arg)

    def not_equals(self, arg: Any) -> Condition:
        return self._add(Operator.NOT_EQUALS, arg)

    def greater(self, arg: Any) -> Condition:
        return self._add(Operator.GREATER, arg)

    def greater_or_equal(self, arg: Any) -> Condition:
        return self._add(Operator.GREATER_OR_EQUAL, arg)

    def lower(self, arg: Any) -> Condition:
        return self._add(Operator.LOWER, arg)

    def lower_or_equal(self, arg: Any) -> Condition:
        return self._add(Operator.LOWER_OR_EQUAL, arg)

    def like(self, arg: str) -> Condition:
        return self._add(Operator.LIKE, arg)

    def not_like(self, arg: str) -> Condition:
        return self._add(Operator.NOT_LIKE, arg)

    def ilike(self, arg: str) -> Condition:
        return self._add(Operator.ILIKE, arg)

    def not_ilike(self, arg: str) -> Condition:
        return self._add(Operator.NOT_ILIKE, arg)

    def contains(self, arg: str) -> Condition:
        return self._add(Operator.CONTAINS, arg)

    def not_contains(self, arg: str) -> Condition:
        return self._add(Operator.NOT_CONTAINS, arg)

    def icontains(self, arg: str) -> Condition:
        return self._add(Operator.ICONTAINS, arg)

    def not_icontains(self, arg: str) -> Condition:
        return self._add(Operator.NOT_ICONTAINS, arg)

    def in_(self, arg: Sequence[Any]) -> Condition:
        return self._add(Operator.IN, list(arg))

    def not_in(self, arg: Sequence[Any]) -> Condition:
        return self._add(Operator.NOT_IN, list(arg))

    def child_of(self, arg: Any) -> Condition:
        return self._add(Operator.CHILD_OF, arg)

    def is_null(self) -> Condition:
        return self._add(Operator.EQUALS, None)

    def is_not_null(self) -> Condition:
        return self._add(Operator.NOT_EQUALS, None)
