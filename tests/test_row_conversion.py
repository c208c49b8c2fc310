"""
Row decoding (Model.scan_to_field_map, Model.convert_values_to_field_type)

Storage rows are read through a cursor, keyed by dotted paths and converted
to each field's representation.
"""

import datetime
import decimal
import sqlite3

import pytest

from bizorm.faults import FieldNotFoundFault, RelationValueFault, RowScanFault
from bizorm.models import DBAPIRowCursor, FieldMap, MappingRowCursor, convert_value, register_conversion


class ListCursor:
    """RowCursor double returning fixed columns and values."""

    def __init__(self, columns, values):
        self._columns = columns
        self._values = values

    def columns(self):
        return list(self._columns)

    def scan(self):
        return tuple(self._values)


class FailingCursor(ListCursor):

    def __init__(self, columns, error):
        super().__init__(columns, ())
        self._error = error

    def scan(self):
        raise self._error


# ============================================================================
# convert_values_to_field_type
# ============================================================================

class TestNullHandling:

    def test_required_fk_null_becomes_zero(self, partner):
        fmap = FieldMap({"manager_id": None})
        partner.convert_values_to_field_type(fmap)
        assert fmap == {"manager_id": 0}

    def test_optional_fk_null_stays_none(self, partner):
        fmap = FieldMap({"company_id": None})
        partner.convert_values_to_field_type(fmap)
        assert fmap == {"company_id": None}

    def test_false_on_optional_fk(self, partner):
        fmap = FieldMap({"company_id": False})
        partner.convert_values_to_field_type(fmap)
        assert fmap["company_id"] is None

    @pytest.mark.parametrize("key,expected", [
        ("name", ""),
        ("age", 0),
        ("score", 0.0),
        ("avatar", b""),
        ("kind", ""),
        ("birthday", None),
        ("last_login", None),
        ("data", None),
    ])
    def test_null_to_zero_value(self, partner, key, expected):
        fmap = FieldMap({key: None})
        partner.convert_values_to_field_type(fmap)
        assert fmap[key] == expected
        assert type(fmap[key]) is type(expected)

    def test_false_on_char_is_empty_string(self, partner):
        fmap = FieldMap({"name": False})
        partner.convert_values_to_field_type(fmap)
        assert fmap["name"] == ""

    def test_false_on_boolean_stays_false(self, partner):
        fmap = FieldMap({"active": False})
        partner.convert_values_to_field_type(fmap)
        assert fmap["active"] is False

    def test_null_to_many_is_fresh_empty_list(self, partner):
        first = FieldMap({"tags_ids": None})
        second = FieldMap({"tags_ids": None})
        partner.convert_values_to_field_type(first)
        partner.convert_values_to_field_type(second)
        assert first["tags_ids"] == []
        assert first["tags_ids"] is not second["tags_ids"]


class TestMatchingTypes:

    def test_values_already_converted_are_untouched(self, partner):
        tags = [3, 1, 2]
        when = datetime.datetime(2024, 1, 2, 3, 4, 5)
        fmap = FieldMap({"name": "John", "age": 42, "tags_ids": tags, "last_login": when, "active": True})
        partner.convert_values_to_field_type(fmap)
        assert fmap == {"name": "John", "age": 42, "tags_ids": [3, 1, 2], "last_login": when, "active": True}
        assert fmap["tags_ids"] is tags


class TestDecoders:

    def test_boolean_from_int(self, partner):
        fmap = FieldMap({"active": 1})
        partner.convert_values_to_field_type(fmap)
        assert fmap["active"] is True

    def test_date_from_string(self, partner):
        fmap = FieldMap({"birthday": "1990-05-17"})
        partner.convert_values_to_field_type(fmap)
        assert fmap["birthday"] == datetime.date(1990, 5, 17)

    def test_datetime_from_string(self, partner):
        fmap = FieldMap({"last_login": "2024-01-02 03:04:05"})
        partner.convert_values_to_field_type(fmap)
        assert fmap["last_login"] == datetime.datetime(2024, 1, 2, 3, 4, 5)

    def test_json_from_text(self, partner):
        fmap = FieldMap({"data": '{"lang": "fr"}'})
        partner.convert_values_to_field_type(fmap)
        assert fmap["data"] == {"lang": "fr"}

    def test_json_scalar_string_kept(self, partner):
        fmap = FieldMap({"data": "hello"})
        partner.convert_values_to_field_type(fmap)
        assert fmap["data"] == "hello"

    def test_json_from_bytes(self, partner):
        fmap = FieldMap({"data": memoryview(b'[1, 2]')})
        partner.convert_values_to_field_type(fmap)
        assert fmap["data"] == [1, 2]

    def test_json_already_decoded(self, partner):
        fmap = FieldMap({"data": {"lang": "fr"}})
        partner.convert_values_to_field_type(fmap)
        assert fmap["data"] == {"lang": "fr"}

    @pytest.mark.parametrize("key", ["birthday", "last_login"])
    def test_unparseable_date_kept(self, partner, key):
        fmap = FieldMap({key: "not a date"})
        partner.convert_values_to_field_type(fmap)
        assert fmap[key] == "not a date"

    def test_custom_decoder_wins(self, registry):
        from bizorm.models import fields

        model = registry.new_model("Meter")
        model.add_fields({"Reading": fields.Integer(decoder=lambda v: int(v, 16))})
        fmap = FieldMap({"reading": "ff"})
        model.convert_values_to_field_type(fmap)
        assert fmap["reading"] == 255


class TestRecordSets:

    def test_to_one_takes_first_id(self, partner, records):
        fmap = FieldMap({"company_id": records("Company", [5, 9])})
        partner.convert_values_to_field_type(fmap)
        assert fmap["company_id"] == 5

    def test_to_one_empty_record_set(self, partner, records):
        fmap = FieldMap({"company_id": records("Company", [])})
        partner.convert_values_to_field_type(fmap)
        assert fmap["company_id"] is None

    def test_to_many_keeps_order(self, partner, records):
        fmap = FieldMap({"tags_ids": records("Tag", [3, 1, 2])})
        partner.convert_values_to_field_type(fmap)
        assert fmap["tags_ids"] == [3, 1, 2]

    def test_record_set_into_plain_field(self, partner, records):
        fmap = FieldMap({"name": records("Partner", [1])})
        with pytest.raises(RelationValueFault) as exc_info:
            partner.convert_values_to_field_type(fmap)
        assert exc_info.value.fatal
        assert exc_info.value.metadata["field"] == "name"


class TestPlainConversions:

    def test_int_to_float(self, partner):
        fmap = FieldMap({"score": 3})
        partner.convert_values_to_field_type(fmap)
        assert fmap["score"] == 3.0
        assert type(fmap["score"]) is float

    def test_decimal_to_float(self, partner):
        fmap = FieldMap({"score": decimal.Decimal("1.5")})
        partner.convert_values_to_field_type(fmap)
        assert fmap["score"] == 1.5

    def test_bytes_to_str(self, partner):
        fmap = FieldMap({"name": b"Jos\xc3\xa9"})
        partner.convert_values_to_field_type(fmap)
        assert fmap["name"] == "José"

    def test_memoryview_to_bytes(self, partner):
        fmap = FieldMap({"avatar": memoryview(b"\x89PNG")})
        partner.convert_values_to_field_type(fmap)
        assert fmap["avatar"] == b"\x89PNG"

    def test_tuple_to_list(self, partner):
        fmap = FieldMap({"tags_ids": (4, 5)})
        partner.convert_values_to_field_type(fmap)
        assert fmap["tags_ids"] == [4, 5]

    def test_bool_never_converted_as_int(self, partner):
        fmap = FieldMap({"age": True})
        partner.convert_values_to_field_type(fmap)
        assert fmap["age"] is True

    def test_unregistered_conversion_left_unchanged(self, partner):
        fmap = FieldMap({"age": "42"})
        partner.convert_values_to_field_type(fmap)
        assert fmap["age"] == "42"

    def test_register_conversion(self):
        class Cents(int):
            pass

        register_conversion(Cents, float, lambda v: v / 100)
        assert convert_value(Cents(250), float) == 2.5


class TestKeys:

    def test_related_path(self, partner):
        fmap = FieldMap({"company_id.name": None, "Company.Parent": None})
        partner.convert_values_to_field_type(fmap)
        assert fmap == {"company_id.name": "", "Company.Parent": None}

    def test_unknown_key(self, partner):
        with pytest.raises(FieldNotFoundFault):
            partner.convert_values_to_field_type(FieldMap({"nope": 1}))

    def test_keys_are_not_renamed(self, partner):
        fmap = FieldMap({"Name": None})
        partner.convert_values_to_field_type(fmap)
        assert list(fmap) == ["Name"]


# ============================================================================
# scan_to_field_map
# ============================================================================

class TestScanToFieldMap:

    def test_row_cursor(self, partner):
        cursor = ListCursor(
            ["id", "name", "company_id", "manager_id", "tags_ids"],
            [1, "John", None, None, (2, 3)],
        )
        fmap = partner.scan_to_field_map(cursor)
        assert isinstance(fmap, FieldMap)
        assert fmap == {"id": 1, "name": "John", "company_id": None, "manager_id": 0, "tags_ids": [2, 3]}

    def test_sql_separator_translated(self, partner):
        cursor = ListCursor(["id", "company_id__name", "manager_id__company_id__parent_id"], [1, None, 7])
        fmap = partner.scan_to_field_map(cursor)
        assert fmap == {"id": 1, "company_id.name": "", "manager_id.company_id.parent_id": 7}

    def test_into_existing_map(self, partner):
        dest = FieldMap({"age": 30})
        fmap = partner.scan_to_field_map(ListCursor(["name"], ["Ann"]), dest)
        assert fmap is dest
        assert dest == {"age": 30, "name": "Ann"}

    def test_scan_error_propagates(self, partner):
        dest = FieldMap({"age": 30})
        error = RowScanFault("connection lost", model="Partner")
        with pytest.raises(RowScanFault) as exc_info:
            partner.scan_to_field_map(FailingCursor(["name"], error), dest)
        assert exc_info.value is error
        assert dest == {"age": 30}

    def test_mapping_row(self, partner):
        fmap = partner.scan_to_field_map({"name": b"Ann", "active": 0})
        assert fmap == {"name": "Ann", "active": False}

    def test_dbapi_cursor(self, partner):
        conn = sqlite3.connect(":memory:")
        try:
            cur = conn.execute(
                "SELECT 1 AS id, 'Ann' AS name, NULL AS company_id, 1 AS active, "
                "'2020-02-29' AS birthday, 2.5 AS score"
            )
            fmap = partner.scan_to_field_map(cur)
        finally:
            conn.close()
        assert fmap == {
            "id": 1,
            "name": "Ann",
            "company_id": None,
            "active": True,
            "birthday": datetime.date(2020, 2, 29),
            "score": 2.5,
        }

    def test_dbapi_cursor_without_row(self, partner):
        conn = sqlite3.connect(":memory:")
        try:
            cur = conn.execute("SELECT 1 AS id WHERE 0")
            with pytest.raises(RowScanFault):
                partner.scan_to_field_map(cur)
        finally:
            conn.close()


class TestRowCursors:

    def test_mapping_row_cursor(self):
        cursor = MappingRowCursor({"a": 1, "b": None})
        assert cursor.columns() == ["a", "b"]
        assert cursor.scan() == (1, None)

    def test_dbapi_without_result_set(self):
        class NoResult:
            description = None

        with pytest.raises(RowScanFault):
            DBAPIRowCursor(NoResult()).columns()
