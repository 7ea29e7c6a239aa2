"""
Tests for schema loading and validation.
"""

import pytest

from falkor.core.exceptions import SchemaError
from falkor.schema import (
    Violation,
    build_registry,
    normalize_schema,
    read_schema_file,
    read_schema_list,
    validate_instance,
)


@pytest.fixture
def content_schema(fixtures_dir):
    schemata = read_schema_list(fixtures_dir / "testToLoad.schema.json")
    normalize_schema(schemata)
    return {schema["id"]: schema for schema in schemata}


class TestLoader:
    """Tests for reading schema files."""

    def test_read_schema_file(self, fixtures_dir):
        schema = read_schema_file(fixtures_dir / "test.schema.json")

        assert schema["id"] == "test"

    def test_missing_file(self, temp_dir):
        with pytest.raises(SchemaError, match="Invalid JSON Schema. Unable to open file"):
            read_schema_file(temp_dir / "missing.json")

    def test_invalid_json(self, fixtures_dir):
        with pytest.raises(SchemaError, match="Invalid JSON Schema. JSON parsing failed."):
            read_schema_file(fixtures_dir / "broken.schema.json")

    def test_read_list_wraps_single_schema(self, fixtures_dir):
        schemata = read_schema_list(fixtures_dir / "test.schema.json")

        assert isinstance(schemata, list)
        assert schemata[0]["id"] == "test"

    def test_read_list_keeps_arrays(self, fixtures_dir):
        schemata = read_schema_list(fixtures_dir / "testToLoad.schema.json")

        assert [schema["id"] for schema in schemata] == ["content"]

    def test_read_list_error_label(self, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text("[")

        with pytest.raises(SchemaError, match="Invalid JSON File"):
            read_schema_list(path)


class TestValidateInstance:
    """Tests for validating documents."""

    @pytest.fixture
    def schema(self, fixtures_dir):
        return normalize_schema(read_schema_file(fixtures_dir / "test.schema.json"))

    def test_valid_document(self, schema):
        instance = {"id": 123, "title": "Test Item", "content": "Test Content"}

        assert validate_instance(instance, schema) == []

    def test_wrong_type(self, schema):
        instance = {"id": "123", "title": "Test Item", "content": "Test Content"}

        violations = validate_instance(instance, schema)

        assert len(violations) == 1
        assert violations[0].path == "id"
        assert str(violations[0]).startswith("Error @ /id: ")

    def test_missing_properties(self, schema):
        violations = validate_instance({"Not": "does not match schema"}, schema)

        messages = [violation.message for violation in violations]
        assert "'id' is a required property" in messages
        assert "'title' is a required property" in messages
        assert "'content' is a required property" in messages

    def test_compiled_pattern(self):
        schema = normalize_schema({"type": "string", "pattern": "^[a-z]+$"})

        assert validate_instance("abc", schema) == []
        assert len(validate_instance("ABC", schema)) == 1

    def test_reference_to_named_schema(self, fixtures_dir, content_schema):
        schema = normalize_schema(read_schema_file(fixtures_dir / "testWithRef.schema.json"))
        instance = {"id": 123, "title": "Test Item", "content": {"text": "foo", "length": 3}}

        assert validate_instance(instance, schema, content_schema) == []

    def test_violation_inside_referenced_schema(self, fixtures_dir, content_schema):
        schema = normalize_schema(read_schema_file(fixtures_dir / "testWithRef.schema.json"))
        instance = {"id": 123, "title": "Test Item", "content": {"text": "FOO", "length": 3}}

        violations = validate_instance(instance, schema, content_schema)

        assert [violation.path for violation in violations] == ["content/text"]

    def test_unresolvable_reference(self, fixtures_dir):
        schema = normalize_schema(read_schema_file(fixtures_dir / "testWithRef.schema.json"))
        instance = {"id": 123, "title": "Test Item", "content": {"text": "foo", "length": 3}}

        with pytest.raises(SchemaError, match="Unable to resolve reference"):
            validate_instance(instance, schema, {})

    def test_explicit_dialect(self):
        schema = {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "required": ["a"],
        }

        violations = validate_instance({}, schema)

        assert [violation.message for violation in violations] == ["'a' is a required property"]


def test_violation_str():
    assert str(Violation(path="a/0", message="bad")) == "Error @ /a/0: bad"


def test_registry_holds_named_schemas(content_schema):
    registry = build_registry(content_schema)

    assert registry.contents("content")["id"] == "content"


class TestViolationMessages:

    def test_pattern_message_shows_source(self):
        schema = normalize_schema({"type": "string", "pattern": "^x"})

        violations = validate_instance("y", schema)

        assert [violation.message for violation in violations] == ["'y' does not match '^x'"]


class TestReferenceBase:
    """Named schemas are found by bare id whatever the referencing schema's id."""

    def test_absolute_root_id(self, content_schema):
        schema = normalize_schema(
            {
                "id": "http://example.com/root",
                "type": "object",
                "properties": {"content": {"$ref": "content"}},
            }
        )

        assert validate_instance({"content": {"text": "foo", "length": 3}}, schema, content_schema) == []
        violations = validate_instance(
            {"content": {"text": "FOO", "length": 3}}, schema, content_schema
        )
        assert [violation.path for violation in violations] == ["content/text"]

    def test_registry_uses_base(self, content_schema):
        registry = build_registry(content_schema, base_uri="http://example.com/root")

        assert registry.contents("http://example.com/content")["id"] == "content"
        assert registry.contents("content")["id"] == "content"
