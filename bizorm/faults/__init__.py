"""
bizorm faults - Structured error handling.

Errors in bizorm are typed fault signals split in two disjoint classes:

- InvariantViolationFault: configuration and programmer errors (unknown
  model, duplicate registration, inconsistent relation value...). They are
  FATAL and must never be silently recovered.
- DataFault: storage and data errors, returned to the caller as ordinary
  recoverable exceptions.
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
    InvariantViolationFault,
    raise_fault,
)

from .domains import (
    ConfigInvalidFault,
    AdapterNotFoundFault,
    ModelNotFoundFault,
    DuplicateModelFault,
    SequenceNotFoundFault,
    DuplicateSequenceFault,
    RegistryFrozenFault,
    FieldNotFoundFault,
    DuplicateFieldFault,
    NotARelationFault,
    RelationValueFault,
    MethodNotFoundFault,
    DuplicateMethodFault,
    DataFault,
    RowScanFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",
    "InvariantViolationFault",
    "raise_fault",

    # Invariant violations
    "ConfigInvalidFault",
    "AdapterNotFoundFault",
    "ModelNotFoundFault",
    "DuplicateModelFault",
    "SequenceNotFoundFault",
    "DuplicateSequenceFault",
    "RegistryFrozenFault",
    "FieldNotFoundFault",
    "DuplicateFieldFault",
    "NotARelationFault",
    "RelationValueFault",
    "MethodNotFoundFault",
    "DuplicateMethodFault",

    # Data faults
    "DataFault",
    "RowScanFault",
]
