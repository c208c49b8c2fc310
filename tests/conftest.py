"""
Shared test fixtures for the bizorm test suite.
"""

import sqlite3
from typing import Any, List

import pytest

from bizorm.config import RegistryConfig
from bizorm.db import SQLiteAdapter
from bizorm.models import ModelRegistry, fields


# ============================================================================
# Record set doubles
# ============================================================================


class FakeRecordSet:
    """Minimal record set handle: an ordered list of ids of one model."""

    def __init__(self, model_name: str, ids: List[int]):
        self._model_name = model_name
        self._ids = list(ids)

    def ids(self) -> List[int]:
        return list(self._ids)

    def collection(self) -> "FakeRecordSet":
        return self

    def model_name(self) -> str:
        return self._model_name


class FakeMethodCaller:

    def __init__(self, env: "FakeEnvironment", model_name: str):
        self.env = env
        self.model_name = model_name

    def call(self, method: str, *args: Any) -> Any:
        self.env.calls.append((self.model_name, method, args))
        return FakeRecordSet(self.model_name, self.env.result_ids)


class FakeEnvironment:
    """Records every method call made through ``pool``."""

    def __init__(self, result_ids: List[int] = None):
        self.result_ids = result_ids if result_ids is not None else [1]
        self.calls: list = []

    def pool(self, model_name: str) -> FakeMethodCaller:
        return FakeMethodCaller(self, model_name)


# ============================================================================
# Registries
# ============================================================================


def build_demo_registry(config: RegistryConfig = None) -> ModelRegistry:
    """Company / Partner / Tag demo models."""
    registry = ModelRegistry(config)

    company = registry.new_model("Company")
    company.add_fields({
        "Name": fields.Char(required=True),
        "Parent": fields.Many2One(relation_model="Company"),
        "Employees": fields.One2Many(relation_model="Partner", reverse_fk="Company"),
    })

    tag = registry.new_model("Tag")
    tag.add_fields({
        "Name": fields.Char(),
        "Color": fields.Integer(),
    })

    partner = registry.new_model("Partner")
    partner.add_fields({
        "Name": fields.Char(required=True),
        "Age": fields.Integer(),
        "Score": fields.Float(),
        "Active": fields.Boolean(),
        "Birthday": fields.Date(),
        "LastLogin": fields.DateTime(),
        "Data": fields.JSON(),
        "Avatar": fields.Binary(),
        "Kind": fields.Selection([("person", "Person"), ("company", "Company")]),
        "Company": fields.Many2One(relation_model="Company"),
        "Manager": fields.Many2One(relation_model="Partner", required=True),
        "Tags": fields.Many2Many(relation_model="Tag"),
    })
    return registry


@pytest.fixture
def registry():
    """Fresh, not yet bootstrapped demo registry."""
    return build_demo_registry()


@pytest.fixture
def bootstrapped(registry):
    registry.bootstrap()
    return registry


@pytest.fixture
def partner(registry):
    return registry.must_get("Partner")


@pytest.fixture
def company(registry):
    return registry.must_get("Company")


@pytest.fixture
def env():
    return FakeEnvironment(result_ids=[7])


@pytest.fixture
def sqlite_connection():
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def sqlite_adapter(sqlite_connection):
    return SQLiteAdapter(sqlite_connection)


@pytest.fixture
def records():
    """Factory building record set handles: ``records("Tag", [3, 1])``."""
    return FakeRecordSet
