"""
bizorm Model Registry - directory of all models and sequences.

A registry is populated during a single-threaded declaration phase, then
frozen by ``bootstrap()``. After that it is read only and safe to share
between threads:

    registry = ModelRegistry()
    partner = registry.new_model("Partner")
    partner.add_fields({"Name": fields.Char()})
    registry.bootstrap()

    registry.must_get("Partner")      # by name
    registry.must_get("partner")      # or by table name
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from ..config import ConfigLoader, RegistryConfig
from ..faults import (
    AdapterNotFoundFault,
    DuplicateModelFault,
    DuplicateSequenceFault,
    ModelNotFoundFault,
    RegistryFrozenFault,
    SequenceNotFoundFault,
    raise_fault,
)
from ..utils import ReadWriteLock, configure_logging
from .fields import Field
from .fieldtype import FieldType
from .mixins import BASE_MIXIN, COMMON_MIXIN, MODEL_MIXIN, declare_base_mixins
from .model import Model
from .options import ModelOption
from .sequences import Sequence

if TYPE_CHECKING:
    from ..db.adapters import DatabaseAdapter

logger = logging.getLogger("bizorm.models.registry")

__all__ = ["ModelRegistry"]


class ModelRegistry:
    """
    Directory of the models and sequences of one application.

    Lookups take a shared lock, registrations an exclusive one. Models are
    indexed both by name and by table name.
    """

    def __init__(self, config: Optional[RegistryConfig] = None):
        self.config = config or RegistryConfig()
        self._lock = ReadWriteLock()
        self._by_name: Dict[str, Model] = {}
        self._by_table_name: Dict[str, Model] = {}
        self._sequences: Dict[str, Sequence] = {}
        self._adapters: Dict[str, DatabaseAdapter] = {}
        self._bootstrapped = False
        if self.config.base_mixins:
            declare_base_mixins(self)

    @classmethod
    def from_config(
        cls,
        paths: Optional[List[str]] = None,
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ModelRegistry:
        """
        Build a registry from layered configuration.

        Reads the ``registry`` section through ``ConfigLoader`` and applies
        its ``log_level`` to the ``bizorm`` logger.
        """
        config = ConfigLoader.load(paths=paths, env_file=env_file, overrides=overrides).registry_config()
        configure_logging(config.log_level)
        return cls(config)

    def __repr__(self) -> str:
        state = "bootstrapped" if self._bootstrapped else "open"
        return f"<ModelRegistry: {len(self)} models, {len(self._sequences)} sequences ({state})>"

    def __contains__(self, name: str) -> bool:
        return self.get(name)[1]

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._by_name)

    @property
    def is_bootstrapped(self) -> bool:
        return self._bootstrapped

    def _check_mutable(self, operation: str) -> None:
        if self._bootstrapped:
            raise_fault(logger, RegistryFrozenFault(operation))

    # ── Models ───────────────────────────────────────────────────────

    def get(self, name_or_table: str) -> Tuple[Optional[Model], bool]:
        """Look a model up by name, then by table name."""
        with self._lock.read():
            model = self._by_name.get(name_or_table) or self._by_table_name.get(name_or_table)
        return model, model is not None

    def must_get(self, name_or_table: str) -> Model:
        model, ok = self.get(name_or_table)
        if not ok:
            raise_fault(logger, ModelNotFoundFault(name_or_table))
        return model

    def models(self) -> List[Model]:
        """All registered models, in registration order."""
        with self._lock.read():
            return list(self._by_name.values())

    def _add(self, model: Model) -> None:
        self._check_mutable(f"register model '{model.name}'")
        with self._lock.write():
            if model.name in self._by_name or model.name in self._by_table_name:
                raise_fault(logger, DuplicateModelFault(model.name))
            if model.table_name in self._by_table_name:
                raise_fault(
                    logger,
                    DuplicateModelFault(model.name, f"table '{model.table_name}' is already used"),
                )
            model.registry = self
            model.fields.model = model
            model.methods.model = model
            self._by_name[model.name] = model
            self._by_table_name[model.table_name] = model
        logger.debug("Registered model %s (table %s)", model.name, model.table_name)

    def _create_model(
        self,
        name: str,
        options: ModelOption = ModelOption.NONE,
        table_name: Optional[str] = None,
        mixin_name: Optional[str] = None,
    ) -> Model:
        self._check_mutable(f"create model '{name}'")
        # Resolved before registration so a failed lookup leaves no trace.
        mixin = self.must_get(mixin_name) if mixin_name is not None else None
        model = Model(name, options, registry=self, table_name=table_name)
        model.fields.add(Field(
            "ID",
            FieldType.INTEGER,
            json="id",
            model=model,
            required=True,
            no_copy=True,
        ))
        if mixin is not None:
            model.inherit_model(mixin)
        self._add(model)
        return model

    def new_model(
        self,
        name: str,
        *,
        options: ModelOption = ModelOption.NONE,
        table_name: Optional[str] = None,
    ) -> Model:
        """Create a regular model, inheriting ``ModelMixin``."""
        return self._create_model(name, options, table_name, MODEL_MIXIN)

    def new_mixin_model(self, name: str) -> Model:
        """Create a mixin model, meant to be inherited by other models."""
        return self._create_model(name, ModelOption.MIXIN)

    def new_transient_model(self, name: str, *, table_name: Optional[str] = None) -> Model:
        """Create a transient model, inheriting ``BaseMixin``."""
        return self._create_model(name, ModelOption.TRANSIENT, table_name, BASE_MIXIN)

    def new_manual_model(self, name: str, *, table_name: Optional[str] = None) -> Model:
        """Create a model whose storage is managed by hand, inheriting ``CommonMixin``."""
        return self._create_model(name, ModelOption.MANUAL, table_name, COMMON_MIXIN)

    # ── Sequences ────────────────────────────────────────────────────

    def get_sequence(self, name: str) -> Tuple[Optional[Sequence], bool]:
        with self._lock.read():
            seq = self._sequences.get(name)
        return seq, seq is not None

    def must_get_sequence(self, name: str) -> Sequence:
        seq, ok = self.get_sequence(name)
        if not ok:
            raise_fault(logger, SequenceNotFoundFault(name))
        return seq

    def sequences(self) -> List[Sequence]:
        with self._lock.read():
            return list(self._sequences.values())

    def _add_sequence(self, sequence: Sequence) -> None:
        self._check_mutable(f"register sequence '{sequence.name}'")
        with self._lock.write():
            if sequence.name in self._sequences:
                raise_fault(logger, DuplicateSequenceFault(sequence.name))
            sequence.registry = self
            self._sequences[sequence.name] = sequence
        logger.debug("Registered sequence %s (%s)", sequence.name, sequence.json)

    def new_sequence(self, name: str) -> Sequence:
        """Create and register the sequence ``name``."""
        sequence = Sequence(name, registry=self)
        self._add_sequence(sequence)
        return sequence

    # ── Storage adapters ─────────────────────────────────────────────

    def register_adapter(self, driver: str, adapter: DatabaseAdapter) -> None:
        """Make ``adapter`` the storage adapter of ``driver``."""
        with self._lock.write():
            self._adapters[driver] = adapter

    def adapter(self) -> DatabaseAdapter:
        """Storage adapter of the configured driver."""
        driver = self.config.driver
        with self._lock.read():
            adapter = self._adapters.get(driver)
        if adapter is None:
            raise_fault(logger, AdapterNotFoundFault(driver))
        return adapter

    # ── Lifecycle ────────────────────────────────────────────────────

    def check_constraints(self) -> List[str]:
        """
        Validate the declared models without raising.

        Returns:
            A list of human readable problems, empty if the registry is sound.
        """
        issues: List[str] = []
        for model in self.models():
            for fi in model.fields.own():
                if fi.relation_model_name is None:
                    continue
                target, ok = self.get(fi.relation_model_name)
                if not ok:
                    issues.append(
                        f"{model.name}.{fi.name}: unknown related model '{fi.relation_model_name}'"
                    )
                    continue
                if fi.reverse_fk and not target.fields.get(fi.reverse_fk)[1]:
                    issues.append(
                        f"{model.name}.{fi.name}: reverse field '{fi.reverse_fk}' "
                        f"not found in '{target.name}'"
                    )
            for mixin in model.mixins:
                if mixin.registry is not self:
                    issues.append(f"{model.name}: mixin '{mixin.name}' belongs to another registry")
            if _inherits_itself(model):
                issues.append(f"{model.name}: circular mixin inheritance")
        return issues

    def bootstrap(self) -> None:
        """
        Resolve relations and freeze the registry.

        Any unknown related model is fatal. Mutations afterwards raise
        ``RegistryFrozenFault``.
        """
        self._check_mutable("bootstrap")
        for model in self.models():
            for fi in model.fields.own():
                if fi.relation_model_name is not None:
                    self.must_get(fi.relation_model_name)
        with self._lock.write():
            self._bootstrapped = True
        logger.info(
            "Model registry bootstrapped: %d models, %d sequences",
            len(self._by_name),
            len(self._sequences),
        )


def _inherits_itself(model: Model) -> bool:
    stack = list(model.mixins)
    seen = set()
    while stack:
        current = stack.pop()
        if current is model:
            return True
        if id(current) in seen:
            continue
        seen.add(id(current))
        stack.extend(current.mixins)
    return False
