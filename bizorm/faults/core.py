"""
bizorm faults - Core types and fault taxonomy.

Defines:
- Fault base class (structured fault objects)
- FaultDomain (explicit fault domains)
- Severity levels
- InvariantViolationFault, the unrecoverable programmer-error kind
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, NoReturn, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines logging level and whether the caller may recover.
    """
    INFO = "info"       # Informational, no action needed
    WARN = "warn"       # Warning, should be reviewed
    ERROR = "error"     # Error, recoverable by the caller
    FATAL = "fatal"     # Fatal, unrecoverable, abort

    # Aliases
    LOW = INFO
    MEDIUM = WARN
    HIGH = ERROR
    CRITICAL = FATAL


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name  # For compatibility with Enum consumers
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Domains
FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")
FaultDomain.REGISTRY = FaultDomain("registry", "Model registry errors")
FaultDomain.MODEL = FaultDomain("model", "Model definition and conversion errors")
FaultDomain.IO = FaultDomain("io", "Storage I/O operations")
FaultDomain.SYSTEM = FaultDomain("system", "System level faults")


# Domain defaults
DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.REGISTRY: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.MODEL: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.IO: {"severity": Severity.ERROR, "retryable": True},
    FaultDomain.SYSTEM: {"severity": Severity.FATAL, "retryable": False},
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class - structured, typed fault object.

    Attributes:
        code: Stable machine-readable identifier (e.g., "MODEL_NOT_FOUND")
        message: Human-readable summary
        severity: Fault severity (INFO, WARN, ERROR, FATAL)
        domain: Fault domain (CONFIG, REGISTRY, MODEL, IO, SYSTEM)
        retryable: Whether this fault can be retried
        metadata: Additional context data

    Example:
        ```python
        raise Fault(
            code="MODEL_NOT_FOUND",
            message="Unknown model 'Partner'",
            domain=FaultDomain.REGISTRY,
        )
        ```
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        # Fallback to class attributes if not provided
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code, message, or domain")

        super().__init__(self.message)

        # Default to ERROR/non-retryable for custom domains
        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR, "retryable": False})
        self.severity = severity or defaults["severity"]
        self.retryable = retryable if retryable is not None else defaults["retryable"]

        self.metadata = metadata or {}

    @property
    def fatal(self) -> bool:
        """True when the fault must not be recovered from."""
        return self.severity == Severity.FATAL

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"Fault(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize fault to dictionary.

        Returns:
            Dictionary representation suitable for logging/serialization
        """
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "metadata": self.metadata,
        }

    def __rshift__(self, other: Fault) -> Fault:
        """
        Fault transform chain operator.

        Transforms this fault into another while preserving causality.
        The target must be a fault instance: concrete fault classes take
        their own constructor arguments.

        Usage:
            ```python
            raise RowScanFault(...) >> Fault("DECODE_FAILED", ..., domain=...)
            ```
        """
        if not isinstance(other, Fault):
            raise TypeError(f"Cannot transform fault to {other!r}")
        new_fault = other
        new_fault.metadata["_cause"] = self
        new_fault.metadata["_transform_chain"] = self.metadata.get("_transform_chain", []) + [self.code]

        return new_fault


class InvariantViolationFault(Fault):
    """
    Programmer or configuration error.

    Raised on unknown models, sequences or fields, duplicate registrations
    and inconsistent relation values. Always FATAL and never retryable:
    callers must abort (or crash-and-restart) rather than recover.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain = FaultDomain.MODEL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=domain,
            severity=Severity.FATAL,
            retryable=False,
            metadata=metadata,
        )


def raise_fault(logger: logging.Logger, fault: Fault) -> NoReturn:
    """Log ``fault`` at ERROR with its serialized payload, then raise it."""
    logger.error("%s", fault, extra={"fault": fault.to_dict()})
    raise fault
