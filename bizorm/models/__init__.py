"""
bizorm Model System - metadata registry and value conversion core.

Usage:
    from bizorm.models import ModelRegistry, fields

    registry = ModelRegistry()

    company = registry.new_model("Company")
    company.add_fields({"Name": fields.Char(required=True)})

    partner = registry.new_model("Partner")
    partner.add_fields({
        "Name": fields.Char(required=True),
        "Company": fields.Many2One(relation_model="Company"),
    })

    registry.bootstrap()

Public API:
    - ModelRegistry: Directory of models and sequences
    - Model: Runtime descriptor of a business entity
    - Field / FieldsCollection / field definitions (``fields`` module)
    - Method / MethodsCollection
    - Condition builder
    - Sequence
"""

from . import fields
from .conditions import Condition, ConditionField, ConditionStart, Operator, Predicate
from .conversion import convert_value, register_conversion
from .cursor import DBAPIRowCursor, MappingRowCursor, RowCursor
from .environment import Environment, MethodCaller, RecordCollection, RecordSet
from .fieldmap import FieldMap
from .fields import Field, FieldDefinition, FieldsCollection
from .fieldtype import FieldType
from .methods import Method, MethodsCollection
from .mixins import BASE_MIXIN, COMMON_MIXIN, MODEL_MIXIN, declare_base_mixins
from .model import Model
from .options import ModelOption
from .paths import ExprSep, SqlSep, jsonize_expr, jsonize_path, split_path, sql_column_to_path
from .registry import ModelRegistry
from .security import AccessControlList, Permission, RecordRule, RecordRuleRegistry
from .sequences import Sequence

__all__ = [
    # Registry
    "ModelRegistry",
    "Model",
    "ModelOption",
    "Sequence",
    "declare_base_mixins",
    "COMMON_MIXIN",
    "BASE_MIXIN",
    "MODEL_MIXIN",
    # Fields
    "fields",
    "Field",
    "FieldDefinition",
    "FieldsCollection",
    "FieldType",
    "FieldMap",
    # Methods
    "Method",
    "MethodsCollection",
    # Paths
    "ExprSep",
    "SqlSep",
    "split_path",
    "jsonize_expr",
    "jsonize_path",
    "sql_column_to_path",
    # Conversion
    "convert_value",
    "register_conversion",
    "RowCursor",
    "DBAPIRowCursor",
    "MappingRowCursor",
    # Conditions
    "Condition",
    "ConditionField",
    "ConditionStart",
    "Operator",
    "Predicate",
    # Collaborators
    "Environment",
    "MethodCaller",
    "RecordCollection",
    "RecordSet",
    # Security
    "AccessControlList",
    "Permission",
    "RecordRule",
    "RecordRuleRegistry",
]
