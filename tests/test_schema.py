"""Tests for argument schemas: declaration rules, coercion and validation."""

import pytest

from testingbot_mcp.registry.exceptions import SchemaDefinitionError, SchemaValidationError
from testingbot_mcp.registry.schema import (
    ArgumentSchema,
    ParamKind,
    ParamSpec,
    VariantSchema,
)


def _validation_errors(schema, arguments):
    with pytest.raises(SchemaValidationError) as exc_info:
        schema.validate(arguments)
    return exc_info.value.errors


# ============================================================================
# Declaration rules
# ============================================================================

class TestParamSpecDefinition:
    """Contradictory declarations fail at definition time."""

    def test_required_with_default_rejected(self):
        with pytest.raises(SchemaDefinitionError, match="cannot declare a default"):
            ParamSpec("limit", ParamKind.INTEGER, required=True, default=10)

    def test_enum_without_choices_rejected(self):
        with pytest.raises(SchemaDefinitionError, match="no choices"):
            ParamSpec("type", ParamKind.ENUM)

    def test_bounds_on_string_rejected(self):
        with pytest.raises(SchemaDefinitionError, match="numeric"):
            ParamSpec("name", ParamKind.STRING, minimum=1)

    def test_inverted_bounds_rejected(self):
        with pytest.raises(SchemaDefinitionError, match="minimum > maximum"):
            ParamSpec("limit", ParamKind.INTEGER, minimum=10, maximum=1)

    def test_items_only_on_arrays(self):
        items = ArgumentSchema(ParamSpec("os", ParamKind.STRING))
        with pytest.raises(SchemaDefinitionError):
            ParamSpec("browser", ParamKind.OBJECT, items=items)

    def test_duplicate_parameter_names_rejected(self):
        with pytest.raises(SchemaDefinitionError, match="Duplicate parameter 'name'"):
            ArgumentSchema(
                ParamSpec("name", ParamKind.STRING),
                ParamSpec("name", ParamKind.STRING),
            )

    def test_variant_must_not_declare_discriminator(self):
        variant = ArgumentSchema(ParamSpec("platformType", ParamKind.STRING))
        with pytest.raises(SchemaDefinitionError, match="discriminator"):
            VariantSchema("platformType", {"desktop": variant})


# ============================================================================
# Coercion
# ============================================================================

class TestArgumentSchemaCoercion:
    """Loosely typed input is coerced per parameter kind."""

    @pytest.fixture
    def schema(self):
        return ArgumentSchema(
            ParamSpec("count", ParamKind.INTEGER),
            ParamSpec("wait", ParamKind.NUMBER),
            ParamSpec("fullPage", ParamKind.BOOLEAN),
            ParamSpec("tunnelId", ParamKind.STRING),
            title="CoercionArguments",
        )

    def test_numeric_strings_accepted(self, schema):
        result = schema.validate({"count": "5", "wait": "2.5"})
        assert result == {"count": 5, "wait": 2.5}

    def test_boolean_strings_accepted(self, schema):
        assert schema.validate({"fullPage": "true"}) == {"fullPage": True}
        assert schema.validate({"fullPage": "false"}) == {"fullPage": False}
        assert schema.validate({"fullPage": True}) == {"fullPage": True}

    @pytest.mark.parametrize("value", ["yes", "on", "t", "1", "TRUE", "off", 1, 0])
    def test_boolean_lookalikes_rejected(self, schema, value):
        errors = _validation_errors(schema, {"fullPage": value})
        assert len(errors) == 1
        assert errors[0].startswith("fullPage:")

    @pytest.mark.parametrize("field", ["count", "wait"])
    @pytest.mark.parametrize("value", [True, False])
    def test_booleans_rejected_as_numbers(self, schema, field, value):
        errors = _validation_errors(schema, {field: value})
        assert len(errors) == 1
        assert errors[0].startswith(f"{field}:")

    def test_numbers_accepted_as_strings(self, schema):
        assert schema.validate({"tunnelId": 123}) == {"tunnelId": "123"}

    def test_unparseable_integer_rejected(self, schema):
        errors = _validation_errors(schema, {"count": "abc"})
        assert len(errors) == 1
        assert errors[0].startswith("count:")

    def test_unknown_arguments_ignored(self, schema):
        assert schema.validate({"count": 1, "unexpected": "x"}) == {"count": 1}

    def test_none_arguments_treated_as_empty(self, schema):
        assert schema.validate(None) == {}

    def test_non_mapping_arguments_rejected(self, schema):
        errors = _validation_errors(schema, ["count", 1])
        assert errors == ["arguments must be an object, got list"]


# ============================================================================
# Validation
# ============================================================================

class TestArgumentSchemaValidation:
    """Required parameters, defaults and refinements."""

    @pytest.fixture
    def schema(self):
        return ArgumentSchema(
            ParamSpec("sessionId", ParamKind.STRING, required=True, non_empty=True),
            ParamSpec("limit", ParamKind.INTEGER, minimum=1, maximum=100, default=10),
            ParamSpec("status", ParamKind.ENUM, choices=("passed", "failed")),
            ParamSpec("url", ParamKind.URL),
            ParamSpec("extra", ParamKind.OBJECT),
            title="ValidationArguments",
        )

    def test_missing_required_parameter_named(self, schema):
        errors = _validation_errors(schema, {})
        assert errors == ["missing required parameter sessionId"]

    def test_default_applied_and_optional_left_absent(self, schema):
        result = schema.validate({"sessionId": "abc"})
        assert result == {"sessionId": "abc", "limit": 10}

    def test_every_failure_reported(self, schema):
        errors = _validation_errors(schema, {"sessionId": "", "limit": 0, "status": "maybe"})
        assert len(errors) == 3
        assert errors[0].startswith("sessionId:")
        assert errors[1].startswith("limit:")
        assert errors[2].startswith("status:")

    def test_enum_membership(self, schema):
        result = schema.validate({"sessionId": "abc", "status": "passed"})
        assert result["status"] == "passed"

    def test_url_kept_verbatim(self, schema):
        result = schema.validate({"sessionId": "abc", "url": "https://example.com"})
        assert result["url"] == "https://example.com"

    def test_relative_url_rejected(self, schema):
        errors = _validation_errors(schema, {"sessionId": "abc", "url": "not-a-url"})
        assert errors == ["url: must be a valid absolute URL, got 'not-a-url'"]

    def test_object_parameter(self, schema):
        result = schema.validate({"sessionId": "abc", "extra": {"idleTimeout": 60}})
        assert result["extra"] == {"idleTimeout": 60}

    @pytest.mark.parametrize("limit", [1, 100, "1", "100"])
    def test_bounds_inclusive(self, schema, limit):
        assert schema.validate({"sessionId": "abc", "limit": limit})["limit"] == int(limit)

    @pytest.mark.parametrize("limit", [0, 101, -5])
    def test_out_of_bounds_rejected(self, schema, limit):
        errors = _validation_errors(schema, {"sessionId": "abc", "limit": limit})
        assert len(errors) == 1
        assert errors[0].startswith("limit:")


class TestArrayItems:
    """Arrays of objects validate every element."""

    @pytest.fixture
    def schema(self):
        browser = ArgumentSchema(
            ParamSpec("browserName", ParamKind.STRING, required=True),
            ParamSpec("version", ParamKind.STRING),
            ParamSpec("os", ParamKind.STRING, required=True),
            title="Browser",
        )
        return ArgumentSchema(
            ParamSpec("browsers", ParamKind.ARRAY, required=True, items=browser),
            title="ArrayArguments",
        )

    def test_items_returned_as_plain_dicts(self, schema):
        result = schema.validate({"browsers": [{"browserName": "chrome", "os": "WIN11"}]})
        assert result == {"browsers": [{"browserName": "chrome", "os": "WIN11"}]}

    def test_item_error_path(self, schema):
        errors = _validation_errors(
            schema,
            {"browsers": [{"browserName": "chrome", "os": "WIN11"}, {"browserName": "firefox"}]}
        )
        assert errors == ["missing required parameter browsers[1].os"]

    def test_item_schema_in_catalog(self, schema):
        descriptor = schema.properties()["browsers"]
        assert descriptor["type"] == "array"
        assert descriptor["items"]["required"] == ["browserName", "os"]


# ============================================================================
# Catalog descriptors
# ============================================================================

def test_param_json_schema():
    """Catalog descriptors carry type, bounds, default and description."""
    param = ParamSpec("limit", ParamKind.INTEGER, description="Page size",
                      minimum=1, maximum=100, default=10)
    assert param.to_json_schema() == {
        "type": "integer",
        "minimum": 1,
        "maximum": 100,
        "description": "Page size",
        "default": 10,
    }


def test_url_and_enum_json_schema():
    """URL and enum kinds map onto string descriptors."""
    assert ParamSpec("url", ParamKind.URL).to_json_schema() == {"type": "string", "format": "uri"}
    assert ParamSpec("type", ParamKind.ENUM, choices=("web", "mobile")).to_json_schema() == {
        "type": "string",
        "enum": ["web", "mobile"],
    }


# ============================================================================
# Variant schemas
# ============================================================================

class TestVariantSchema:
    """Discriminated union selection and catalog merge."""

    @pytest.fixture
    def schema(self):
        return VariantSchema(
            "kind",
            {
                "circle": ArgumentSchema(
                    ParamSpec("name", ParamKind.STRING, required=True, description="Label"),
                    ParamSpec("radius", ParamKind.NUMBER, required=True),
                    ParamSpec("unit", ParamKind.ENUM, choices=("cm", "mm"), default="cm"),
                    title="Circle",
                ),
                "square": ArgumentSchema(
                    ParamSpec("name", ParamKind.STRING, required=True, description="Title"),
                    ParamSpec("side", ParamKind.NUMBER, required=True),
                    ParamSpec("unit", ParamKind.ENUM, choices=("mm", "in")),
                    title="Square",
                ),
            },
            label="shape kind",
        )

    def test_selected_variant_only(self, schema):
        result = schema.validate({"kind": "circle", "name": "c", "radius": "2", "side": "x"})
        assert result == {"kind": "circle", "name": "c", "radius": 2.0, "unit": "cm"}

    def test_other_variant_requirements_ignored(self, schema):
        errors = _validation_errors(schema, {"kind": "square", "name": "s"})
        assert errors == ["missing required parameter side"]

    def test_unknown_discriminator(self, schema):
        errors = _validation_errors(schema, {"kind": "triangle"})
        assert errors == ["unrecognized shape kind 'triangle' (expected 'circle' or 'square')"]

    def test_absent_discriminator(self, schema):
        errors = _validation_errors(schema, {"name": "x"})
        assert errors == ["unrecognized shape kind no value (expected 'circle' or 'square')"]

    def test_unhashable_discriminator(self, schema):
        errors = _validation_errors(schema, {"kind": ["circle"]})
        assert "unrecognized shape kind ['circle']" in errors[0]

    def test_merged_properties(self, schema):
        properties = schema.properties()
        assert list(properties) == ["kind", "name", "radius", "unit", "side"]
        assert properties["kind"]["enum"] == ["circle", "square"]
        assert properties["unit"]["enum"] == ["cm", "mm", "in"]
        assert properties["name"]["description"] == "circle: Label; square: Title"
        assert properties["radius"]["description"] == "(circle only)"

    def test_required_is_common_subset(self, schema):
        assert schema.required() == ["kind", "name"]
