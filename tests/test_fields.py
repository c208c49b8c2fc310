"""
Field descriptors (bizorm/models/fields.py, fieldtype.py)

Tests FieldType tags, default json names, field definitions, decoders and
FieldsCollection lookups over the mixin chain.
"""

import datetime

import pytest

from bizorm.faults import DuplicateFieldFault, FieldNotFoundFault
from bizorm.models import Field, FieldType, fields
from bizorm.models.fields import (
    decode_boolean,
    decode_date,
    decode_datetime,
    decode_json,
    json_field_name,
)


# ============================================================================
# FieldType
# ============================================================================

class TestFieldType:

    def test_relation_predicates(self):
        assert FieldType.MANY2ONE.is_relation_type()
        assert FieldType.MANY2ONE.is_fk_relation_type()
        assert FieldType.ONE2ONE.is_fk_relation_type()
        assert not FieldType.REV2ONE.is_fk_relation_type()
        assert FieldType.MANY2MANY.is_2many_relation_type()
        assert FieldType.ONE2MANY.is_2many_relation_type()
        assert FieldType.ONE2MANY.is_non_stored()
        assert FieldType.REV2ONE.is_non_stored()
        assert not FieldType.CHAR.is_relation_type()

    def test_python_types(self):
        assert FieldType.CHAR.python_type is str
        assert FieldType.INTEGER.python_type is int
        assert FieldType.MANY2ONE.python_type is int
        assert FieldType.MANY2MANY.python_type is list
        assert FieldType.DATE.python_type is datetime.date
        assert FieldType.DATETIME.python_type is datetime.datetime
        assert FieldType.BOOLEAN.python_type is bool

    def test_zero_values(self):
        assert FieldType.CHAR.zero_value() == ""
        assert FieldType.INTEGER.zero_value() == 0
        assert FieldType.FLOAT.zero_value() == 0.0
        assert FieldType.BOOLEAN.zero_value() is False
        assert FieldType.BINARY.zero_value() == b""
        assert FieldType.MANY2ONE.zero_value() == 0
        assert FieldType.DATE.zero_value() is None
        assert FieldType.DATETIME.zero_value() is None
        assert FieldType.JSON.zero_value() is None

    def test_to_many_zero_value_is_fresh(self):
        first = FieldType.MANY2MANY.zero_value()
        first.append(1)
        assert FieldType.MANY2MANY.zero_value() == []


# ============================================================================
# Json names
# ============================================================================

class TestJsonNames:

    @pytest.mark.parametrize("name,field_type,expected", [
        ("Name", FieldType.CHAR, "name"),
        ("LastLogin", FieldType.DATETIME, "last_login"),
        ("Company", FieldType.MANY2ONE, "company_id"),
        ("Profile", FieldType.ONE2ONE, "profile_id"),
        ("User", FieldType.REV2ONE, "user_id"),
        ("Tags", FieldType.MANY2MANY, "tags_ids"),
        ("Employees", FieldType.ONE2MANY, "employees_ids"),
        ("ExternalID", FieldType.CHAR, "external_id"),
    ])
    def test_default(self, name, field_type, expected):
        assert json_field_name(name, field_type) == expected

    def test_explicit_json(self, registry):
        model = registry.new_model("Invoice")
        model.add_fields({"Number": fields.Char(json="inv_number")})
        assert model.fields.must_get("Number").json == "inv_number"
        assert model.fields.must_get("inv_number").name == "Number"


# ============================================================================
# Field definitions
# ============================================================================

class TestFieldDefinitions:

    def test_declared_attributes(self, partner):
        fi = partner.fields.must_get("Name")
        assert isinstance(fi, Field)
        assert fi.field_type == FieldType.CHAR
        assert fi.required
        assert fi.model is partner
        assert fi.string == "Name"
        assert fi.decoder is None

    def test_relation_attributes(self, partner, company):
        fi = partner.fields.must_get("Company")
        assert fi.relation_model_name == "Company"
        assert fi.is_relation()
        assert fi.related_model is company

        reverse = company.fields.must_get("Employees")
        assert reverse.reverse_fk == "Company"
        assert reverse.json == "employees_ids"

    def test_non_relation_has_no_related_model(self, partner):
        assert partner.fields.must_get("Age").related_model is None

    def test_relation_from_model_object(self, registry, company):
        model = registry.new_model("Office")
        model.add_fields({"Owner": fields.Many2One(relation_model=company, on_delete="cascade")})
        assert model.fields.must_get("Owner").relation_model_name == "Company"

    def test_default_decoders(self, partner):
        assert partner.fields.must_get("Active").decoder is decode_boolean
        assert partner.fields.must_get("Birthday").decoder is decode_date
        assert partner.fields.must_get("LastLogin").decoder is decode_datetime
        assert partner.fields.must_get("Data").decoder is decode_json

    def test_custom_decoder(self, registry):
        model = registry.new_model("Gauge")
        model.add_fields({"Level": fields.Integer(decoder=lambda v: int(v) * 10)})
        assert model.fields.must_get("Level").decoder("4") == 40

    def test_selection(self, partner):
        assert partner.fields.must_get("Kind").selection == [("person", "Person"), ("company", "Company")]

    def test_to_dict(self, partner):
        d = partner.fields.must_get("Company").to_dict()
        assert d == {
            "name": "Company",
            "json": "company_id",
            "type": "many2one",
            "required": False,
            "no_copy": False,
            "relation": "Company",
            "model": "Partner",
        }


# ============================================================================
# Decoders
# ============================================================================

class TestDecoders:

    def test_decode_date(self):
        assert decode_date("2024-03-01") == datetime.date(2024, 3, 1)
        assert decode_date(datetime.datetime(2024, 3, 1, 12, 0)) == datetime.date(2024, 3, 1)

    def test_decode_datetime(self):
        assert decode_datetime("2024-03-01T10:20:30") == datetime.datetime(2024, 3, 1, 10, 20, 30)
        aware = decode_datetime("2024-03-01T10:20:30Z")
        assert aware.tzinfo is not None
        assert decode_datetime(datetime.date(2024, 3, 1)) == datetime.datetime(2024, 3, 1)

    def test_decode_json(self):
        assert decode_json('{"a": 1}') == {"a": 1}
        assert decode_json(b"[1, 2]") == [1, 2]
        assert decode_json({"a": 1}) == {"a": 1}

    def test_decode_boolean(self):
        assert decode_boolean(1) is True
        assert decode_boolean(0) is False
        assert decode_boolean("yes") is True
        assert decode_boolean("f") is False


# ============================================================================
# FieldsCollection
# ============================================================================

class TestFieldsCollection:

    def test_get_by_name_or_json(self, partner):
        by_name, ok = partner.fields.get("Company")
        assert ok
        by_json, ok = partner.fields.get("company_id")
        assert ok
        assert by_name is by_json

    def test_get_unknown(self, partner):
        fi, ok = partner.fields.get("Nope")
        assert fi is None
        assert not ok
        assert "Nope" not in partner.fields

    def test_must_get_unknown(self, partner):
        with pytest.raises(FieldNotFoundFault) as exc_info:
            partner.fields.must_get("Nope")
        assert exc_info.value.metadata == {"model": "Partner", "field": "Nope"}

    def test_duplicate_name(self, partner):
        with pytest.raises(DuplicateFieldFault):
            partner.add_fields({"Name": fields.Char()})

    def test_duplicate_json(self, partner):
        with pytest.raises(DuplicateFieldFault):
            partner.add_fields({"Alias": fields.Char(json="name")})

    def test_own_vs_all(self, partner):
        own = [f.name for f in partner.fields.own()]
        assert own[0] == "ID"
        assert "CreateDate" not in own
        names = partner.fields.names()
        assert names[:len(own)] == own
        assert names[len(own):] == ["ExternalID", "Version", "CreateDate", "WriteDate", "DisplayName"]
        assert [f.name for f in partner.fields] == names

    def test_own_declaration_shadows_mixin(self, registry):
        model = registry.new_model("Note")
        model.add_fields({"DisplayName": fields.Text()})
        assert model.fields.must_get("DisplayName").field_type == FieldType.TEXT
        assert model.fields.names().count("DisplayName") == 1

    def test_first_mixin_wins(self, registry):
        first = registry.new_mixin_model("First")
        first.add_fields({"Code": fields.Char()})
        second = registry.new_mixin_model("Second")
        second.add_fields({"Code": fields.Integer()})
        model = registry.new_model("Product")
        model.inherit_model(first)
        model.inherit_model(second)
        assert model.fields.must_get("Code").model is first

    def test_mixin_fields_visible_after_late_declaration(self, registry):
        mixin = registry.new_mixin_model("Auditable")
        model = registry.new_model("Ledger")
        model.inherit_model(mixin)
        mixin.add_fields({"AuditedBy": fields.Char()})
        assert "AuditedBy" in model.fields

    def test_mixin_cycle_terminates(self, registry):
        a = registry.new_mixin_model("A")
        b = registry.new_mixin_model("B")
        a.inherit_model(b)
        b.inherit_model(a)
        assert a.fields.get("Missing") == (None, False)
        assert "ID" in a.fields.names()

    def test_json_names(self, partner):
        assert "manager_id" in partner.fields.json_names()
        assert "tags_ids" in partner.fields.json_names()
