"""
bizorm faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- REGISTRY faults
- MODEL faults
- IO faults
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, InvariantViolationFault, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigInvalidFault(InvariantViolationFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            domain=FaultDomain.CONFIG,
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


class AdapterNotFoundFault(InvariantViolationFault):
    """No storage adapter is registered for the active driver."""

    def __init__(self, driver: str, **kwargs):
        super().__init__(
            code="ADAPTER_NOT_FOUND",
            message=f"No storage adapter registered for driver '{driver}'",
            domain=FaultDomain.CONFIG,
            metadata={"driver": driver, **kwargs.get("metadata", {})},
        )


# ============================================================================
# REGISTRY Faults
# ============================================================================

class ModelNotFoundFault(InvariantViolationFault):
    """Model not found in registry."""

    def __init__(self, model_name: str, **kwargs):
        super().__init__(
            code="MODEL_NOT_FOUND",
            message=f"Unknown model '{model_name}'",
            domain=FaultDomain.REGISTRY,
            metadata={"model": model_name, **kwargs.get("metadata", {})},
        )


class DuplicateModelFault(InvariantViolationFault):
    """A model with the same name or table name is already registered."""

    def __init__(self, model_name: str, reason: str = "already registered", **kwargs):
        super().__init__(
            code="MODEL_DUPLICATE",
            message=f"Trying to add already existing model '{model_name}': {reason}",
            domain=FaultDomain.REGISTRY,
            metadata={"model": model_name, "reason": reason, **kwargs.get("metadata", {})},
        )


class SequenceNotFoundFault(InvariantViolationFault):
    """Sequence not found in registry."""

    def __init__(self, sequence_name: str, **kwargs):
        super().__init__(
            code="SEQUENCE_NOT_FOUND",
            message=f"Unknown sequence '{sequence_name}'",
            domain=FaultDomain.REGISTRY,
            metadata={"sequence": sequence_name, **kwargs.get("metadata", {})},
        )


class DuplicateSequenceFault(InvariantViolationFault):
    """A sequence with the same name is already registered."""

    def __init__(self, sequence_name: str, **kwargs):
        super().__init__(
            code="SEQUENCE_DUPLICATE",
            message=f"Trying to add already existing sequence '{sequence_name}'",
            domain=FaultDomain.REGISTRY,
            metadata={"sequence": sequence_name, **kwargs.get("metadata", {})},
        )


class RegistryFrozenFault(InvariantViolationFault):
    """Mutation attempted after the registry was bootstrapped."""

    def __init__(self, operation: str, **kwargs):
        super().__init__(
            code="REGISTRY_FROZEN",
            message=f"Cannot {operation}: the model registry is already bootstrapped",
            domain=FaultDomain.REGISTRY,
            metadata={"operation": operation, **kwargs.get("metadata", {})},
        )


# ============================================================================
# MODEL Faults
# ============================================================================

class FieldNotFoundFault(InvariantViolationFault):
    """A path segment does not name a declared field."""

    def __init__(self, model_name: str, field_name: str, **kwargs):
        super().__init__(
            code="FIELD_NOT_FOUND",
            message=f"Unknown field '{field_name}' in model '{model_name}'",
            metadata={"model": model_name, "field": field_name, **kwargs.get("metadata", {})},
        )


class DuplicateFieldFault(InvariantViolationFault):
    """A field with the same name or json name is already declared."""

    def __init__(self, model_name: str, field_name: str, **kwargs):
        super().__init__(
            code="FIELD_DUPLICATE",
            message=f"Field '{field_name}' is already declared in model '{model_name}'",
            metadata={"model": model_name, "field": field_name, **kwargs.get("metadata", {})},
        )


class NotARelationFault(InvariantViolationFault):
    """A path tries to traverse a non relational field."""

    def __init__(self, model_name: str, field_name: str, **kwargs):
        super().__init__(
            code="FIELD_NOT_RELATION",
            message=f"Field '{field_name}' is not a relation in model '{model_name}'",
            metadata={"model": model_name, "field": field_name, **kwargs.get("metadata", {})},
        )


class RelationValueFault(InvariantViolationFault):
    """A record set value targets neither an identifier nor an identifier list."""

    def __init__(self, model_name: str, field_name: str, target: str, **kwargs):
        super().__init__(
            code="RELATION_VALUE_INCONSISTENT",
            message=(
                f"Non consistent type for '{model_name}.{field_name}': "
                f"cannot store a record set into a '{target}' value"
            ),
            metadata={
                "model": model_name,
                "field": field_name,
                "target": target,
                **kwargs.get("metadata", {}),
            },
        )


class MethodNotFoundFault(InvariantViolationFault):
    """Method not declared on a model or its mixins."""

    def __init__(self, model_name: str, method_name: str, **kwargs):
        super().__init__(
            code="METHOD_NOT_FOUND",
            message=f"Unknown method '{method_name}' in model '{model_name}'",
            metadata={"model": model_name, "method": method_name, **kwargs.get("metadata", {})},
        )


class DuplicateMethodFault(InvariantViolationFault):
    """A method with the same name is already declared on the model."""

    def __init__(self, model_name: str, method_name: str, **kwargs):
        super().__init__(
            code="METHOD_DUPLICATE",
            message=f"Method '{method_name}' is already declared in model '{model_name}'",
            metadata={"model": model_name, "method": method_name, **kwargs.get("metadata", {})},
        )


# ============================================================================
# IO Faults
# ============================================================================

class DataFault(Fault):
    """Base class for recoverable storage/data faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        retryable: bool = True,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.IO,
            severity=severity,
            retryable=retryable,
            metadata=metadata,
        )


class RowScanFault(DataFault):
    """Reading a row from a storage cursor failed."""

    def __init__(self, reason: str, model: Optional[str] = None, **kwargs):
        target = f" for model '{model}'" if model else ""
        super().__init__(
            code="ROW_SCAN_FAILED",
            message=f"Cannot scan row{target}: {reason}",
            metadata={"model": model, "reason": reason, **kwargs.get("metadata", {})},
        )
