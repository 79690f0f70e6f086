"""
Tests for seedconf.schema module.

Tests JSON Schema validation including:
- Accepting valid values and the empty schema
- First-error reporting with structured labels
- Malformed schemas, strict mode and unresolvable references
"""

from __future__ import annotations

import pytest

from seedconf.exceptions import LoadFailure
from seedconf.schema import validate

PERSON = {
    "type": "object",
    "required": ["name", "age"],
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "integer", "minimum": 0},
    },
}


def _failure(value, schema) -> LoadFailure:
    with pytest.raises(LoadFailure) as exc_info:
        validate(value, schema)
    return exc_info.value


class TestValidValues:
    """Tests for values that satisfy the schema."""

    def test_valid_object(self):
        """Test that a conforming value passes."""
        validate({"name": "name.foo", "age": 18}, PERSON)

    @pytest.mark.parametrize("value", [{}, [], "text", 0, None, {"a": [1, {"b": 2}]}])
    def test_empty_schema_accepts_everything(self, value):
        """Test that {} accepts any value."""
        validate(value, {})

    def test_annotations_are_allowed(self):
        """Test that annotation keywords do not trip strict mode."""
        schema = {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "$id": "http://example.com/app.json",
            "title": "App",
            "description": "Application settings",
            "$comment": "kept for humans",
            "type": "object",
            "properties": {"port": {"type": "integer", "default": 80, "examples": [8080]}},
        }

        validate({"port": 1}, schema)

    def test_property_names_are_not_keywords(self):
        """Test that property names matching no keyword are fine."""
        schema = {"properties": {"anything": {"type": "string"}, "title": {}}}

        validate({"anything": "x", "title": 3}, schema)


class TestBadAttribute:
    """Tests for values that violate the schema."""

    def test_missing_required_property(self):
        """Test the labels for a missing required property."""
        err = _failure({"name": "name.foo"}, PERSON)

        assert err.message == "bad attribute"
        assert err.labels["instancePath"] == ""
        assert err.labels["keyword"] == "required"
        assert err.labels["params"] == {"missingProperty": "age"}
        assert err.labels["schemaPath"] == "#/required"
        assert "age" in err.labels["message"]

    def test_first_missing_property_reported(self):
        """Test that only the first of several missing properties is reported."""
        err = _failure({}, PERSON)

        assert err.labels["params"] == {"missingProperty": "name"}

    def test_nested_type_error(self):
        """Test instance and schema paths for a nested violation."""
        err = _failure({"name": "x", "age": "eighteen"}, PERSON)

        assert err.labels["instancePath"] == "/age"
        assert err.labels["keyword"] == "type"
        assert err.labels["params"] == {"type": "integer"}
        assert err.labels["schemaPath"] == "#/properties/age/type"

    def test_minimum(self):
        """Test params for a numeric bound."""
        err = _failure({"name": "x", "age": -1}, PERSON)

        assert err.labels["keyword"] == "minimum"
        assert err.labels["params"] == {"comparison": ">=", "limit": 0}

    def test_array_index_in_instance_path(self):
        """Test that array indexes appear in the instance path."""
        schema = {"type": "array", "items": {"type": "string"}}

        err = _failure(["a", 2], schema)

        assert err.labels["instancePath"] == "/1"
        assert err.labels["schemaPath"] == "#/items/type"

    def test_enum(self):
        """Test params for enum."""
        schema = {"properties": {"gender": {"enum": ["male", "female"]}}}

        err = _failure({"gender": "other"}, schema)

        assert err.labels["params"] == {"allowedValues": ["male", "female"]}

    def test_additional_property(self):
        """Test params naming the first extra property."""
        schema = {"properties": {"name": {}}, "additionalProperties": False}

        err = _failure({"name": "x", "extra": 1, "more": 2}, schema)

        assert err.labels["keyword"] == "additionalProperties"
        assert err.labels["params"] == {"additionalProperty": "extra"}

    def test_pointer_escaping(self):
        """Test that '/' and '~' in property names are escaped."""
        schema = {"properties": {"a/b~c": {"type": "string"}}}

        err = _failure({"a/b~c": 1}, schema)

        assert err.labels["instancePath"] == "/a~1b~0c"

    def test_first_error_is_deterministic(self):
        """Test that repeated validation reports the same single error."""
        value = {"name": 1, "age": -5}

        first = _failure(value, PERSON).labels
        for _ in range(5):
            assert _failure(value, PERSON).labels == first

    def test_unlisted_keyword_has_empty_params(self):
        """Test that keywords without structured params report {}."""
        schema = {"not": {"type": "string"}}

        err = _failure("text", schema)

        assert err.labels["keyword"] == "not"
        assert err.labels["params"] == {}


class TestBadSchema:
    """Tests for schemas that cannot be used."""

    def test_malformed_schema(self):
        """Test that a schema failing the metaschema is rejected."""
        err = _failure({}, {"type": "no-such-type"})

        assert err.message == "bad schema"
        assert set(err.labels) == {"message"}

    @pytest.mark.parametrize("dialect", [[], {}, 7, None])
    def test_non_string_dialect(self, dialect):
        """Test that a $schema that is not a string is rejected."""
        err = _failure({}, {"$schema": dialect})

        assert err.message == "bad schema"
        assert set(err.labels) == {"message"}

    def test_unknown_keyword(self):
        """Test that an unknown keyword fails in strict mode."""
        err = _failure({}, {"type": "object", "requried": ["name"]})

        assert err.message == "bad schema"
        assert err.labels == {"message": 'strict mode: unknown keyword: "requried"'}

    def test_unknown_nested_keyword(self):
        """Test that unknown keywords are found inside subschemas."""
        schema = {
            "type": "object",
            "properties": {"items": {"type": "array", "items": {"typo": "string"}}},
        }

        err = _failure({}, schema)

        assert err.labels == {"message": 'strict mode: unknown keyword: "typo"'}

    def test_unknown_keyword_in_definitions(self):
        """Test that definitions are checked even when unused."""
        schema = {"definitions": {"port": {"minimun": 1}}}

        err = _failure({}, schema)

        assert err.labels == {"message": 'strict mode: unknown keyword: "minimun"'}

    def test_unresolvable_local_reference(self):
        """Test that a $ref to a missing definition is a bad schema."""
        schema = {"properties": {"port": {"$ref": "#/definitions/port"}}}

        err = _failure({"port": 1}, schema)

        assert err.message == "bad schema"
        assert set(err.labels) == {"reference", "schema", "message"}
        assert "definitions/port" in err.labels["reference"]

    def test_unresolvable_remote_reference(self):
        """Test that remote references are not fetched and fail."""
        schema = {"$ref": "http://example.invalid/schema.json"}

        err = _failure({}, schema)

        assert err.message == "bad schema"
        assert err.labels["reference"] == "http://example.invalid/schema.json"
        assert err.labels["schema"] == "http://example.invalid/schema.json"

    def test_resolvable_reference(self):
        """Test that a valid local $ref validates normally."""
        schema = {
            "definitions": {"port": {"type": "integer"}},
            "properties": {"port": {"$ref": "#/definitions/port"}},
        }

        validate({"port": 80}, schema)
        assert _failure({"port": "80"}, schema).message == "bad attribute"
