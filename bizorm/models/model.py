"""
bizorm Model - runtime descriptor of a business entity.

A ``Model`` owns its fields and methods, the models it inherits from
(mixins), and the security handles of the entity. Models are created and
registered through a ``ModelRegistry``:

    partner = registry.new_model("Partner")
    partner.add_fields({
        "Name": fields.Char(required=True),
        "Company": fields.Many2One(relation_model="Company"),
    })

    row = partner.scan_to_field_map(cursor)
    # {"name": "John", "company_id": 3, ...}
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, TYPE_CHECKING

from ..faults import (
    DuplicateMethodFault,
    RelationValueFault,
    raise_fault,
)
from ..utils import snake_case
from .conditions import Condition, ConditionField
from .conversion import convert_value
from .cursor import DBAPIRowCursor, MappingRowCursor, RowCursor
from .environment import Environment, RecordCollection, RecordSet
from .fieldmap import FieldMap
from .fields import Field, FieldDefinition, FieldsCollection
from .methods import Method, MethodsCollection
from .options import ModelOption
from .paths import ExprSep, jsonize_path, split_path, sql_column_to_path
from .security import AccessControlList, RecordRuleRegistry

if TYPE_CHECKING:
    from .registry import ModelRegistry

logger = logging.getLogger("bizorm.models.model")

__all__ = ["Model"]


class Model:
    """
    Runtime descriptor of one business entity.

    Attributes:
        name: Model name, unique in its registry (``Partner``)
        table_name: Storage table name, unique in its registry (``partner``)
        options: ``ModelOption`` flags
        acl: Model level access-control list
        rules_registry: Record rules of the model
        fields: Own fields, mixin fields resolved lazily
        methods: Own methods, mixin methods resolved lazily
        mixins: Inherited models, in declaration order
        registry: Owning registry
    """

    def __init__(
        self,
        name: str,
        options: ModelOption = ModelOption.NONE,
        *,
        registry: Optional[ModelRegistry] = None,
        table_name: Optional[str] = None,
    ):
        self.name = name
        self.options = options
        self.table_name = table_name or snake_case(name)
        self.acl = AccessControlList()
        self.rules_registry = RecordRuleRegistry()
        self.fields = FieldsCollection()
        self.methods = MethodsCollection()
        self.fields.model = self
        self.methods.model = self
        self.mixins: List[Model] = []
        self.registry = registry

    def __repr__(self) -> str:
        return f"<Model: {self.name} ({self.table_name})>"

    def underlying(self) -> Model:
        return self

    # ── Options ──────────────────────────────────────────────────────

    def is_mixin(self) -> bool:
        return bool(self.options & ModelOption.MIXIN)

    def is_manual(self) -> bool:
        return bool(self.options & ModelOption.MANUAL)

    def is_system(self) -> bool:
        return bool(self.options & ModelOption.SYSTEM)

    def is_transient(self) -> bool:
        return bool(self.options & ModelOption.TRANSIENT)

    def is_m2m_link(self) -> bool:
        return bool(self.options & ModelOption.MANY2MANY_LINK)

    def has_parent_field(self) -> bool:
        """True if the model declares (or inherits) a ``Parent`` field."""
        return self.fields.get("Parent")[1]

    # ── Declaration ──────────────────────────────────────────────────

    def _check_mutable(self, operation: str) -> None:
        if self.registry is not None:
            self.registry._check_mutable(f"{operation} on model '{self.name}'")

    def inherit_model(self, mixin: Model) -> None:
        """Append ``mixin`` to the models this one inherits from."""
        self._check_mutable("inherit model")
        self.mixins.append(mixin.underlying())

    def add_fields(self, definitions: Mapping[str, FieldDefinition]) -> None:
        """Declare fields from a ``{name: definition}`` mapping."""
        self._check_mutable("add fields")
        for name, definition in definitions.items():
            self.fields.add(definition.declare(self, name))

    def add_field(self, field: Field) -> None:
        self._check_mutable("add field")
        field.model = self
        self.fields.add(field)

    def add_method(self, name: str, fnct: Callable, doc: str = "") -> Method:
        """Declare a new method on this model."""
        self._check_mutable("add method")
        if any(m.name == name for m in self.methods.own()):
            raise_fault(logger, DuplicateMethodFault(self.name, name))
        method = Method(name, fnct, doc=doc, model=self)
        self.methods.add(method)
        return method

    def extend_method(self, name: str, fnct: Callable) -> Method:
        """
        Override method ``name`` with ``fnct``.

        A method only inherited from a mixin is first copied on this model,
        so that extending it never alters the mixin.
        """
        self._check_mutable("extend method")
        inherited = self.methods.must_get(name)
        if inherited.model is not self:
            method = Method(name, inherited.underlying, doc=inherited.doc, model=self)
            method.layers = list(inherited.layers)
            self.methods.add(method)
            inherited = method
        return inherited.extend(fnct)

    # ── Path resolution ──────────────────────────────────────────────

    def get_related_model_info(self, path: str, skip_last: bool = False) -> Model:
        """
        Return the model reached by following ``path``.

        With ``skip_last`` the last segment is not followed, which yields
        the model owning the field that segment names. Resolution stops at
        the first non relational segment.
        """
        if not path:
            return self
        exprs = split_path(path)
        fi = self.fields.must_get(exprs[0])
        related = fi.related_model
        if related is None or (len(exprs) == 1 and skip_last):
            return self
        if len(exprs) > 1:
            return related.get_related_model_info(ExprSep.join(exprs[1:]), skip_last)
        return related

    def get_related_field_info(self, path: str) -> Field:
        """Return the field named by the last segment of ``path``."""
        exprs = split_path(path)
        rmi = self.get_related_model_info(path, skip_last=True) if len(exprs) > 1 else self
        return rmi.fields.must_get(exprs[-1])

    def jsonize_field_name(self, name: str) -> str:
        return jsonize_path(self, name)

    def jsonize_field_map(self, fmap: Mapping[str, Any]) -> FieldMap:
        """Return a new FieldMap whose keys are json paths."""
        return FieldMap((self.jsonize_field_name(k), v) for k, v in fmap.items())

    def merge_field_maps(self, dest: FieldMap, src: Mapping[str, Any]) -> FieldMap:
        """
        Copy every entry of ``src`` into ``dest`` under its json key.

        ``dest`` is updated in place and returned.
        """
        for key, value in src.items():
            dest[self.jsonize_field_name(key)] = value
        return dest

    # ── Row decoding ─────────────────────────────────────────────────

    def scan_to_field_map(self, cursor: Any, dest: Optional[FieldMap] = None) -> FieldMap:
        """
        Read the current row of ``cursor`` into a FieldMap.

        ``cursor`` is a ``RowCursor``, a PEP 249 cursor or an already
        fetched mapping row. SQL column names are turned into dotted paths
        and every value is converted to its field's representation. Errors
        raised while scanning propagate unchanged.
        """
        if dest is None:
            dest = FieldMap()
        row = _as_row_cursor(cursor)
        columns = row.columns()
        values = row.scan()
        for column, value in zip(columns, values):
            dest[sql_column_to_path(column)] = value
        self.convert_values_to_field_type(dest)
        return dest

    def convert_values_to_field_type(self, fmap: FieldMap) -> None:
        """Convert in place every value of ``fmap`` to its field's type."""
        for key, value in list(fmap.items()):
            fi = self.get_related_field_info(key)
            target = fi.python_type
            if value is False:
                value = None
            if value is not None and type(value) is target:
                continue
            if value is None:
                if fi.field_type.is_fk_relation_type() and not fi.required:
                    converted = None
                else:
                    converted = fi.zero_value()
            elif fi.decoder is not None:
                converted = fi.decoder(value)
            elif isinstance(value, RecordSet):
                converted = self._convert_relation_value(fi, key, value)
            else:
                converted = convert_value(value, target)
            fmap[key] = converted

    def _convert_relation_value(self, fi: Field, key: str, value: RecordSet) -> Any:
        ids = list(value.ids())
        if fi.python_type is int:
            return ids[0] if ids else None
        if fi.python_type is list:
            return ids
        raise_fault(
            logger,
            RelationValueFault(self.name, key, getattr(fi.python_type, "__name__", str(fi.python_type))),
        )

    # ── Conditions ───────────────────────────────────────────────────

    def field(self, name: str) -> ConditionField:
        """Start a condition on field path ``name``."""
        return ConditionField(split_path(name))

    def filtered_on(self, field: str, condition: Condition) -> Condition:
        """Return ``condition`` rebased under the relation path ``field``."""
        return condition.prefixed(field)

    # ── Record sets ──────────────────────────────────────────────────

    def create(self, env: Environment, data: Mapping[str, Any]) -> RecordCollection:
        """Create a record of this model in ``env`` and return it."""
        return env.pool(self.name).call("Create", data).collection()

    def search(self, env: Environment, condition: Condition) -> RecordCollection:
        """Return the records of this model matching ``condition``."""
        return env.pool(self.name).call("Search", condition).collection()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "table_name": self.table_name,
            "options": [opt.name for opt in ModelOption if opt and opt in self.options],
            "mixins": [m.name for m in self.mixins],
            "fields": [f.to_dict() for f in self.fields.all()],
            "methods": self.methods.names(),
        }


def _as_row_cursor(cursor: Any) -> RowCursor:
    if isinstance(cursor, RowCursor):
        return cursor
    if isinstance(cursor, Mapping):
        return MappingRowCursor(cursor)
    return DBAPIRowCursor(cursor)
