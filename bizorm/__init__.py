"""
bizorm - Metadata registry and value conversion core of a business-object
persistence layer.

- Models: declared at startup in an explicit ModelRegistry, then frozen
- Fields: typed descriptors with lazy mixin inheritance
- Paths: dotted field paths across relation chains
- Rows: storage rows decoded into json keyed FieldMaps
- Faults: typed invariant violations and recoverable data faults
"""

__version__ = "0.1.0"

from .config import ConfigLoader, RegistryConfig
from .faults import DataFault, Fault, InvariantViolationFault
from .models import (
    Condition,
    Field,
    FieldMap,
    FieldType,
    Model,
    ModelOption,
    ModelRegistry,
    Sequence,
    fields,
)
from .utils import configure_logging

__all__ = [
    "__version__",
    "configure_logging",
    "ConfigLoader",
    "RegistryConfig",
    "Fault",
    "InvariantViolationFault",
    "DataFault",
    "Condition",
    "Field",
    "FieldMap",
    "FieldType",
    "Model",
    "ModelOption",
    "ModelRegistry",
    "Sequence",
    "fields",
]
