"""
bizorm base mixins.

Every registry declares, unless configured otherwise, three mixin models
that regular models inherit:

- ``CommonMixin``: inherited by every kind of model
- ``BaseMixin``: ``CommonMixin`` plus creation and write timestamps
- ``ModelMixin``: ``BaseMixin`` plus external identifier and version
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import fields

if TYPE_CHECKING:
    from .registry import ModelRegistry

__all__ = ["COMMON_MIXIN", "BASE_MIXIN", "MODEL_MIXIN", "declare_base_mixins"]

COMMON_MIXIN = "CommonMixin"
BASE_MIXIN = "BaseMixin"
MODEL_MIXIN = "ModelMixin"


def declare_base_mixins(registry: ModelRegistry) -> None:
    common = registry.new_mixin_model(COMMON_MIXIN)
    common.add_fields({
        "DisplayName": fields.Char(string="Display Name", no_copy=True),
    })

    base = registry.new_mixin_model(BASE_MIXIN)
    base.inherit_model(common)
    base.add_fields({
        "CreateDate": fields.DateTime(string="Created On", no_copy=True),
        "WriteDate": fields.DateTime(string="Updated On", no_copy=True),
    })

    model = registry.new_mixin_model(MODEL_MIXIN)
    model.inherit_model(base)
    model.add_fields({
        "ExternalID": fields.Char(string="Record External ID", required=True, no_copy=True, index=True),
        "Version": fields.Integer(no_copy=True),
    })
