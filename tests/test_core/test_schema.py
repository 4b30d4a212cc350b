"""Tests for SchemaValidator."""

from __future__ import annotations

import pytest

from kextract.core.extractor import SessionGuard
from kextract.core.schema import SchemaValidator
from kextract.core.types.knowledge import FieldSpec, FieldType


def _entry(**overrides):
    entry = {
        "type": "string",
        "description": "A thing",
        "question": "What is the thing?",
    }
    entry.update(overrides)
    return entry


class TestValidSchemas:
    def test_valid_schema_builds_record(self, contact_schema):
        result = SchemaValidator().validate(contact_schema, True)
        assert result.ok
        assert list(result.record) == ["email", "age", "newsletter"]
        assert isinstance(result.record["age"], FieldSpec)
        assert result.record["age"].type is FieldType.NUMBER
        assert result.record["newsletter"].enum == [True, False]

    def test_record_starts_outstanding(self, contact_schema):
        result = SchemaValidator().validate(contact_schema, False)
        assert all(not spec.is_resolved for spec in result.record.values())

    def test_record_does_not_alias_input(self, email_schema):
        result = SchemaValidator().validate(email_schema, True)
        result.record["email"].value = "x@y.z"
        assert "value" not in email_schema["email"]

    @pytest.mark.parametrize("field_type", ["string", "number", "boolean", "object", "array"])
    def test_every_supported_type(self, field_type):
        result = SchemaValidator().validate({"f": _entry(type=field_type)}, True)
        assert result.ok

    def test_empty_schema_is_valid(self):
        result = SchemaValidator().validate({}, False)
        assert result.ok
        assert result.record == {}

    def test_prefilled_value_kept_when_type_matches(self):
        result = SchemaValidator().validate({"f": _entry(value="done")}, True)
        assert result.record["f"].value == "done"

    def test_prefilled_value_dropped_when_type_wrong(self):
        result = SchemaValidator().validate({"f": _entry(value=3)}, True)
        assert result.record["f"].value is None


class TestDefects:
    def test_non_mapping_entry(self):
        result = SchemaValidator().validate({"f": "string"}, True)
        assert [i.code for i in result.issues] == ["entry"]
        assert result.issues[0].key == "f"
        assert result.record is None

    def test_empty_key(self):
        result = SchemaValidator().validate({"": _entry()}, True)
        assert [i.code for i in result.issues] == ["key"]

    def test_non_string_key(self):
        result = SchemaValidator().validate({42: _entry()}, True)
        assert [i.code for i in result.issues] == ["key"]
        assert result.issues[0].value == 42

    def test_missing_type_is_a_compound_defect(self):
        entry = _entry()
        del entry["type"]
        result = SchemaValidator().validate({"f": entry}, True)
        assert [i.code for i in result.issues] == ["type", "unsupported_type"]

    def test_unsupported_type(self):
        result = SchemaValidator().validate({"f": _entry(type="date")}, True)
        assert [i.code for i in result.issues] == ["unsupported_type"]
        assert result.issues[0].value == "date"

    @pytest.mark.parametrize("attr", ["description", "question"])
    def test_empty_text_attribute(self, attr):
        result = SchemaValidator().validate({"f": _entry(**{attr: ""})}, True)
        assert [i.code for i in result.issues] == [attr]

    @pytest.mark.parametrize("attr", ["description", "question"])
    def test_non_string_text_attribute(self, attr):
        result = SchemaValidator().validate({"f": _entry(**{attr: 7})}, True)
        assert [i.code for i in result.issues] == [attr]

    def test_enum_must_be_a_list(self):
        result = SchemaValidator().validate({"f": _entry(enum="a,b")}, True)
        assert [i.code for i in result.issues] == ["enum"]

    @pytest.mark.parametrize("force", [None, 1, 0, "true", "false", []])
    def test_force_must_be_boolean(self, email_schema, force):
        result = SchemaValidator().validate(email_schema, force)
        assert [i.code for i in result.issues] == ["force"]

    def test_not_a_mapping_at_all(self):
        result = SchemaValidator().validate(["email"], True)
        assert [i.code for i in result.issues] == ["entry"]


class TestAccumulation:
    def test_collects_every_defect(self):
        schema = {
            "a": _entry(type="date"),           # 1
            "b": "not an object",               # 1
            "c": _entry(description="", question=None),  # 2
            "": _entry(),                       # 1
        }
        result = SchemaValidator().validate(schema, "yes")  # 1
        assert len(result.issues) == 6
        assert not result.ok

    def test_empty_object_entry_reports_each_missing_attribute(self):
        result = SchemaValidator().validate({"f": {}}, True)
        codes = [i.code for i in result.issues]
        assert codes == ["type", "unsupported_type", "description", "question"]

    def test_issue_count_never_below_defect_count(self):
        for k in range(1, 5):
            schema = {f"f{i}": _entry(type="bogus") for i in range(k)}
            result = SchemaValidator().validate(schema, True)
            assert len(result.issues) >= k


class TestGuard:
    def test_active_session_short_circuits(self, contact_schema):
        guard = SessionGuard()
        guard.active = True
        result = SchemaValidator(guard).validate({"f": "broken"}, "broken")
        assert [i.code for i in result.issues] == ["in_use"]
        assert "already in use" in result.issues[0].message

    def test_inactive_guard_validates_normally(self, contact_schema):
        result = SchemaValidator(SessionGuard()).validate(contact_schema, True)
        assert result.ok
