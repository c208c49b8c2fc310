"""
bizorm Model Fields - field descriptors, declarations and collections.

A ``Field`` is the static metadata of one business attribute. Fields are
declared on a model through definition objects:

    partner = registry.new_model("Partner")
    partner.add_fields({
        "Name": fields.Char(required=True),
        "Company": fields.Many2One(relation_model="Company"),
        "Tags": fields.Many2Many(relation_model="Tag"),
    })

Default json names follow the storage convention: ``Name`` -> ``name``,
``Company`` -> ``company_id``, ``Tags`` -> ``tags_ids``.
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
    TYPE_CHECKING,
)

from ..faults import (
    DuplicateFieldFault,
    FieldNotFoundFault,
    raise_fault,
)
from ..utils.strings import snake_case
from .fieldtype import FieldType
from .security import AccessControlList

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger("bizorm.models.fields")

__all__ = [
    "Field",
    "FieldsCollection",
    "FieldDefinition",
    "Binary",
    "Boolean",
    "Char",
    "Date",
    "DateTime",
    "Float",
    "HTML",
    "Integer",
    "JSON",
    "Many2Many",
    "Many2One",
    "One2Many",
    "One2One",
    "Rev2One",
    "Selection",
    "Text",
    "json_field_name",
]

Decoder = Callable[[Any], Any]


def json_field_name(name: str, field_type: FieldType) -> str:
    """Default json name of a field: snake case, suffixed for relations."""
    res = snake_case(name)
    if field_type in (FieldType.MANY2ONE, FieldType.ONE2ONE, FieldType.REV2ONE):
        res += "_id"
    elif field_type.is_2many_relation_type():
        res += "_ids"
    return res


# ── Field descriptor ─────────────────────────────────────────────────────────


class Field:
    """
    Static metadata of one business attribute.

    Identity is ``(model, name)``. ``decoder`` is the optional custom
    decode capability used when converting storage values; ``python_type``
    is the representation token the converter targets.
    """

    def __init__(
        self,
        name: str,
        field_type: FieldType,
        *,
        json: Optional[str] = None,
        model: Optional[Model] = None,
        relation_model_name: Optional[str] = None,
        reverse_fk: Optional[str] = None,
        required: bool = False,
        no_copy: bool = False,
        string: str = "",
        help: str = "",
        index: bool = False,
        unique: bool = False,
        selection: Optional[Sequence[Tuple[str, str]]] = None,
        decoder: Optional[Decoder] = None,
        python_type: Optional[type] = None,
    ):
        self.name = name
        self.json = json or json_field_name(name, field_type)
        self.field_type = field_type
        self.model = model
        self.relation_model_name = relation_model_name
        self.reverse_fk = reverse_fk
        self.required = required
        self.no_copy = no_copy
        self.string = string or name
        self.help = help
        self.index = index
        self.unique = unique
        self.selection = list(selection) if selection else None
        self.decoder = decoder
        self.python_type = python_type or field_type.python_type
        self.acl = AccessControlList()
        self._related_model: Optional[Model] = None

    def __repr__(self) -> str:
        owner = self.model.name if self.model is not None else "?"
        return f"<Field: {owner}.{self.name} ({self.field_type.value})>"

    @property
    def related_model(self) -> Optional[Model]:
        """Target model of a relation field, None for other fields."""
        if self.relation_model_name is None:
            return None
        if self._related_model is None:
            self._related_model = self.model.registry.must_get(self.relation_model_name)
        return self._related_model

    def is_relation(self) -> bool:
        return self.field_type.is_relation_type()

    def zero_value(self) -> Any:
        return self.field_type.zero_value()

    def to_dict(self) -> Dict[str, Any]:
        """Describe this field for inspection output."""
        data: Dict[str, Any] = {
            "name": self.name,
            "json": self.json,
            "type": self.field_type.value,
            "required": self.required,
            "no_copy": self.no_copy,
        }
        if self.relation_model_name:
            data["relation"] = self.relation_model_name
        if self.model is not None:
            data["model"] = self.model.name
        return data


# ── Decoders ─────────────────────────────────────────────────────────────────
# Decoders leave values they cannot interpret unchanged.


def decode_date(value: Any) -> Any:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value[:10])
        except ValueError:
            return value
    return value


def decode_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return datetime.datetime.combine(value, datetime.time())
    return value


def decode_json(value: Any) -> Any:
    """
    Parse serialized JSON text.

    Drivers that already decode json columns hand over Python objects,
    which may be plain strings: text that is not valid JSON is kept as is.
    """
    if isinstance(value, memoryview):
        value = value.tobytes()
    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return value
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def decode_boolean(value: Any) -> Any:
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "t", "true", "y", "yes")
    return value


# ── Field definitions ────────────────────────────────────────────────────────


class FieldDefinition:
    """
    Declaration of a field, turned into a ``Field`` by ``Model.add_fields``.
    """

    field_type: FieldType = FieldType.CHAR
    default_decoder: Optional[Decoder] = None

    def __init__(
        self,
        *,
        json: Optional[str] = None,
        string: str = "",
        help: str = "",
        required: bool = False,
        no_copy: bool = False,
        index: bool = False,
        unique: bool = False,
        decoder: Optional[Decoder] = None,
    ):
        self.json = json
        self.string = string
        self.help = help
        self.required = required
        self.no_copy = no_copy
        self.index = index
        self.unique = unique
        self.decoder = decoder

    def field_kwargs(self) -> Dict[str, Any]:
        return {
            "json": self.json,
            "string": self.string,
            "help": self.help,
            "required": self.required,
            "no_copy": self.no_copy,
            "index": self.index,
            "unique": self.unique,
            "decoder": self.decoder or type(self).default_decoder,
        }

    def declare(self, model: Model, name: str) -> Field:
        """Build the field descriptor of ``name`` on ``model``."""
        return Field(name, self.field_type, model=model, **self.field_kwargs())


class Binary(FieldDefinition):
    field_type = FieldType.BINARY


class Boolean(FieldDefinition):
    field_type = FieldType.BOOLEAN
    default_decoder = staticmethod(decode_boolean)


class Char(FieldDefinition):
    field_type = FieldType.CHAR

    def __init__(self, *, size: int = 0, **kwargs: Any):
        self.size = size
        super().__init__(**kwargs)


class Text(FieldDefinition):
    field_type = FieldType.TEXT


class HTML(FieldDefinition):
    field_type = FieldType.HTML


class Integer(FieldDefinition):
    field_type = FieldType.INTEGER


class Float(FieldDefinition):
    field_type = FieldType.FLOAT


class Date(FieldDefinition):
    field_type = FieldType.DATE
    default_decoder = staticmethod(decode_date)


class DateTime(FieldDefinition):
    field_type = FieldType.DATETIME
    default_decoder = staticmethod(decode_datetime)


class JSON(FieldDefinition):
    field_type = FieldType.JSON
    default_decoder = staticmethod(decode_json)


class Selection(FieldDefinition):
    field_type = FieldType.SELECTION

    def __init__(self, selection: Sequence[Tuple[str, str]] = (), **kwargs: Any):
        self.selection = list(selection)
        super().__init__(**kwargs)

    def field_kwargs(self) -> Dict[str, Any]:
        kwargs = super().field_kwargs()
        kwargs["selection"] = self.selection
        return kwargs


class _RelationDefinition(FieldDefinition):
    """Base class for relation declarations."""

    def __init__(self, relation_model: Union[str, Model], **kwargs: Any):
        self.relation_model = relation_model
        super().__init__(**kwargs)

    @property
    def relation_model_name(self) -> str:
        if isinstance(self.relation_model, str):
            return self.relation_model
        return self.relation_model.name

    def field_kwargs(self) -> Dict[str, Any]:
        kwargs = super().field_kwargs()
        kwargs["relation_model_name"] = self.relation_model_name
        return kwargs


class Many2One(_RelationDefinition):
    field_type = FieldType.MANY2ONE

    def __init__(self, relation_model: Union[str, Model], *, on_delete: str = "SET NULL", **kwargs: Any):
        self.on_delete = on_delete.upper()
        super().__init__(relation_model, **kwargs)


class One2One(Many2One):
    field_type = FieldType.ONE2ONE


class _ReverseDefinition(_RelationDefinition):

    def __init__(self, relation_model: Union[str, Model], *, reverse_fk: str, **kwargs: Any):
        self.reverse_fk = reverse_fk
        super().__init__(relation_model, **kwargs)

    def field_kwargs(self) -> Dict[str, Any]:
        kwargs = super().field_kwargs()
        kwargs["reverse_fk"] = self.reverse_fk
        return kwargs


class Rev2One(_ReverseDefinition):
    field_type = FieldType.REV2ONE


class One2Many(_ReverseDefinition):
    field_type = FieldType.ONE2MANY


class Many2Many(_RelationDefinition):
    field_type = FieldType.MANY2MANY


# ── Fields collection ────────────────────────────────────────────────────────


class FieldsCollection:
    """
    Ordered, keyed container of the fields declared on one model.

    Lookups are resolved lazily over the mixin chain: the model's own
    declarations first, then each mixin in declaration order (recursively),
    the first match winning.
    """

    def __init__(self) -> None:
        self._by_name: Dict[str, Field] = {}
        self._by_json: Dict[str, Field] = {}
        self.model: Optional[Model] = None

    def __repr__(self) -> str:
        owner = self.model.name if self.model is not None else "?"
        return f"<FieldsCollection: {owner} ({len(self._by_name)} own)>"

    def __contains__(self, name: str) -> bool:
        return self.get(name)[1]

    def __iter__(self) -> Iterator[Field]:
        return iter(self.all())

    def add(self, field: Field) -> None:
        """Declare ``field`` on this collection's model."""
        if field.name in self._by_name or field.json in self._by_json:
            raise_fault(logger, DuplicateFieldFault(self._model_name, field.name))
        self._by_name[field.name] = field
        self._by_json[field.json] = field

    def get(self, name: str) -> Tuple[Optional[Field], bool]:
        """Return the field with the given name or json name."""
        fi = self._lookup(name, set())
        return fi, fi is not None

    def must_get(self, name: str) -> Field:
        """Same as ``get`` but fatal if the field does not exist."""
        fi = self._lookup(name, set())
        if fi is None:
            raise_fault(logger, FieldNotFoundFault(self._model_name, name))
        return fi

    def own(self) -> List[Field]:
        """Fields declared directly on this model."""
        return list(self._by_name.values())

    def all(self) -> List[Field]:
        """Effective fields: own declarations then mixin ones, by name."""
        res: Dict[str, Field] = {}
        self._collect(res, set())
        return list(res.values())

    def names(self) -> List[str]:
        return [f.name for f in self.all()]

    def json_names(self) -> List[str]:
        return [f.json for f in self.all()]

    @property
    def _model_name(self) -> str:
        return self.model.name if self.model is not None else "<unbound>"

    def _mixins(self) -> List[Model]:
        if self.model is None:
            return []
        return list(self.model.mixins)

    def _lookup(self, name: str, visited: Set[int]) -> Optional[Field]:
        visited.add(id(self))
        fi = self._by_name.get(name) or self._by_json.get(name)
        if fi is not None:
            return fi
        for mixin in self._mixins():
            if id(mixin.fields) in visited:
                continue
            fi = mixin.fields._lookup(name, visited)
            if fi is not None:
                return fi
        return None

    def _collect(self, res: Dict[str, Field], visited: Set[int]) -> None:
        visited.add(id(self))
        for name, fi in self._by_name.items():
            res.setdefault(name, fi)
        for mixin in self._mixins():
            if id(mixin.fields) not in visited:
                mixin.fields._collect(res, visited)
