"""
Argument schemas for registered operations.

Every operation declares its parameters as an ordered list of ``ParamSpec``
entries. Each entry is tagged with a ``ParamKind`` that fixes how loosely
typed input is coerced and which refinements apply. The list is compiled once
into a pydantic model, so validation and coercion are pydantic's while the
declaration stays explicit and JSON Schema for the tool catalog is generated
from the same source.

Two schema shapes exist:
- ArgumentSchema: a flat list of parameters
- VariantSchema: a discriminated union of ArgumentSchemas selected by one
  string parameter (e.g. ``platformType`` = desktop | mobile)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    create_model,
)

from ..utils.urls import is_valid_url
from .exceptions import SchemaDefinitionError, SchemaValidationError

logger = logging.getLogger(__name__)

# Type aliases
JSONSchema = Dict[str, Any]


class _Missing:
    """Marker for "no default declared"."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


# ============================================================================
# Parameter kinds
# ============================================================================

class ParamKind(str, Enum):
    """Semantic parameter types."""
    STRING = "string"
    INTEGER = "integer"     # accepts numeric strings
    NUMBER = "number"       # accepts numeric strings
    BOOLEAN = "boolean"     # accepts "true" / "false"
    ENUM = "enum"
    URL = "url"             # absolute URL, kept verbatim
    OBJECT = "object"
    ARRAY = "array"


_NUMERIC_KINDS = (ParamKind.INTEGER, ParamKind.NUMBER)


def _require_url(value: str) -> str:
    if not is_valid_url(value):
        raise ValueError(f"must be a valid absolute URL, got {value!r}")
    return value


def _parse_boolean(value: Any) -> Any:
    # Only the exact literals; any other string is an error
    if isinstance(value, str):
        if value == "true":
            return True
        if value == "false":
            return False
        raise ValueError(f"must be true or false, got {value!r}")
    return value


def _reject_boolean(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"must be a number, got {value!r}")
    return value


# ============================================================================
# Parameter specification
# ============================================================================

@dataclass(frozen=True)
class ParamSpec:
    """
    One declared parameter.

    Attributes:
        name: Parameter name as seen on the wire
        kind: Semantic type, drives coercion and JSON Schema
        description: Human-readable description for the catalog
        required: Whether callers must supply the parameter
        default: Value substituted when an optional parameter is omitted
        minimum: Inclusive lower bound (numeric kinds)
        maximum: Inclusive upper bound (numeric kinds)
        choices: Allowed values (ENUM)
        non_empty: Reject empty strings
        pattern: Regular expression the string must match
        items: Schema of each element (ARRAY of objects)
    """
    name: str
    kind: ParamKind
    description: str = ""
    required: bool = False
    default: Any = MISSING
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    choices: Tuple[str, ...] = ()
    non_empty: bool = False
    pattern: Optional[str] = None
    items: Optional["ArgumentSchema"] = None

    def __post_init__(self):
        if not self.name:
            raise SchemaDefinitionError("Parameter name is required")
        if self.required and self.has_default:
            raise SchemaDefinitionError(
                f"Parameter '{self.name}' is required and cannot declare a default"
            )
        if self.kind == ParamKind.ENUM and not self.choices:
            raise SchemaDefinitionError(f"Enum parameter '{self.name}' declares no choices")
        if (self.minimum is not None or self.maximum is not None) and self.kind not in _NUMERIC_KINDS:
            raise SchemaDefinitionError(
                f"Bounds are only valid on numeric parameters ('{self.name}' is {self.kind.value})"
            )
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise SchemaDefinitionError(f"Parameter '{self.name}' has minimum > maximum")
        if self.items is not None and self.kind != ParamKind.ARRAY:
            raise SchemaDefinitionError(f"Only array parameters take an item schema ('{self.name}')")

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def annotation(self) -> Any:
        """Python type handed to pydantic for this parameter."""
        if self.kind == ParamKind.STRING:
            return str
        if self.kind == ParamKind.INTEGER:
            return Annotated[int, BeforeValidator(_reject_boolean)]
        if self.kind == ParamKind.NUMBER:
            return Annotated[float, BeforeValidator(_reject_boolean)]
        if self.kind == ParamKind.BOOLEAN:
            return Annotated[StrictBool, BeforeValidator(_parse_boolean)]
        if self.kind == ParamKind.ENUM:
            return Literal[self.choices]
        if self.kind == ParamKind.URL:
            return Annotated[str, AfterValidator(_require_url)]
        if self.kind == ParamKind.OBJECT:
            return Dict[str, Any]
        if self.items is not None:
            return List[self.items.model]
        return List[Any]

    def field_definition(self, alias: str) -> Tuple[Any, Any]:
        """(annotation, FieldInfo) pair for ``create_model``."""
        constraints: Dict[str, Any] = {}
        if self.minimum is not None:
            constraints["ge"] = self.minimum
        if self.maximum is not None:
            constraints["le"] = self.maximum
        if self.non_empty:
            constraints["min_length"] = 1
        if self.pattern:
            constraints["pattern"] = self.pattern

        if self.required:
            default = ...
        elif self.has_default:
            default = self.default
        else:
            # Never validated; omitted parameters are left out of the result
            default = None

        return (
            self.annotation(),
            Field(default, alias=alias, description=self.description or None, **constraints)
        )

    def to_json_schema(self) -> JSONSchema:
        """Catalog descriptor for this parameter."""
        if self.kind == ParamKind.ENUM:
            schema: JSONSchema = {"type": "string", "enum": list(self.choices)}
        elif self.kind == ParamKind.URL:
            schema = {"type": "string", "format": "uri"}
        elif self.kind == ParamKind.ARRAY:
            schema = {"type": "array"}
            if self.items is not None:
                schema["items"] = self.items.to_json_schema()
        else:
            schema = {"type": self.kind.value}

        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        if self.non_empty:
            schema["minLength"] = 1
        if self.pattern:
            schema["pattern"] = self.pattern
        if self.description:
            schema["description"] = self.description
        if self.has_default:
            schema["default"] = self.default

        return schema


# ============================================================================
# Error formatting
# ============================================================================

def _format_location(loc: Tuple[Any, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "arguments"


def format_validation_errors(error: ValidationError) -> List[str]:
    """Turn a pydantic ``ValidationError`` into one reason per failure."""
    messages: List[str] = []
    for item in error.errors():
        path = _format_location(tuple(item.get("loc", ())))
        error_type = item.get("type")
        message = item.get("msg", "invalid value")

        if error_type == "missing":
            messages.append(f"missing required parameter {path}")
        elif error_type == "value_error":
            messages.append(f"{path}: {message.replace('Value error, ', '', 1)}")
        else:
            messages.append(f"{path}: {message}")
    return messages


# ============================================================================
# Schemas
# ============================================================================

class BaseSchema(ABC):
    """Common interface of argument schemas."""

    @abstractmethod
    def validate(self, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Coerce and validate raw arguments.

        Raises:
            SchemaValidationError: If any parameter fails
        """

    @abstractmethod
    def properties(self) -> Dict[str, JSONSchema]:
        """Per-parameter catalog descriptors, in declaration order."""

    @abstractmethod
    def required(self) -> List[str]:
        """Names of parameters callers must supply."""

    def to_json_schema(self) -> JSONSchema:
        return {
            "type": "object",
            "properties": self.properties(),
            "required": self.required(),
        }


def _ensure_mapping(arguments: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if arguments is None:
        return {}
    if not isinstance(arguments, Mapping):
        raise SchemaValidationError(
            [f"arguments must be an object, got {type(arguments).__name__}"]
        )
    return arguments


class ArgumentSchema(BaseSchema):
    """Ordered, flat set of parameters compiled into a pydantic model."""

    def __init__(self, *params: ParamSpec, title: str = "Arguments"):
        seen = set()
        for param in params:
            if param.name in seen:
                raise SchemaDefinitionError(f"Duplicate parameter '{param.name}' in {title}")
            seen.add(param.name)

        self.title = title
        self.params: Tuple[ParamSpec, ...] = tuple(params)
        self._field_names = [f"arg_{index}" for index in range(len(self.params))]
        self.model = self._build_model()
        logger.debug(f"Compiled argument schema {title} with {len(self.params)} parameters")

    def _build_model(self) -> type:
        fields = {
            field_name: param.field_definition(alias=param.name)
            for field_name, param in zip(self._field_names, self.params)
        }
        return create_model(
            self.title,
            __config__=ConfigDict(
                extra="ignore",
                populate_by_name=False,
                coerce_numbers_to_str=True,
            ),
            **fields
        )

    def __len__(self) -> int:
        return len(self.params)

    def __iter__(self):
        return iter(self.params)

    def get(self, name: str) -> Optional[ParamSpec]:
        for param in self.params:
            if param.name == name:
                return param
        return None

    def validate(self, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        arguments = _ensure_mapping(arguments)
        try:
            instance = self.model.model_validate(dict(arguments))
        except ValidationError as e:
            raise SchemaValidationError(format_validation_errors(e)) from e
        return self._collect(instance)

    def _collect(self, instance: BaseModel) -> Dict[str, Any]:
        """Plain dict of validated values; omitted optionals stay absent."""
        result: Dict[str, Any] = {}
        provided = instance.model_fields_set

        for field_name, param in zip(self._field_names, self.params):
            if field_name in provided:
                value = getattr(instance, field_name)
                if param.items is not None and isinstance(value, list):
                    value = [param.items._collect(item) for item in value]
                result[param.name] = value
            elif param.has_default:
                result[param.name] = param.default

        return result

    def properties(self) -> Dict[str, JSONSchema]:
        return {param.name: param.to_json_schema() for param in self.params}

    def required(self) -> List[str]:
        return [param.name for param in self.params if param.required]


class VariantSchema(BaseSchema):
    """
    Discriminated union of argument schemas.

    The discriminator value picks exactly one variant; only that variant's
    parameters are validated. Fields belonging to other variants are ignored.
    """

    def __init__(
        self,
        discriminator: str,
        variants: Mapping[str, ArgumentSchema],
        label: Optional[str] = None,
        description: str = ""
    ):
        if not variants:
            raise SchemaDefinitionError(f"Variant schema '{discriminator}' declares no variants")
        for tag, schema in variants.items():
            if schema.get(discriminator) is not None:
                raise SchemaDefinitionError(
                    f"Variant '{tag}' must not declare the discriminator '{discriminator}'"
                )

        self.discriminator = discriminator
        self.variants: Dict[str, ArgumentSchema] = dict(variants)
        self.label = label or discriminator
        self.description = description

    @property
    def tags(self) -> List[str]:
        return list(self.variants)

    def select(self, arguments: Mapping[str, Any]) -> Tuple[str, ArgumentSchema]:
        """Pick the variant named by the discriminator.

        Raises:
            SchemaValidationError: If the discriminator is absent or unknown
        """
        tag = arguments.get(self.discriminator)
        if not isinstance(tag, str) or tag not in self.variants:
            expected = " or ".join(repr(t) for t in self.variants)
            received = "no value" if tag is None else repr(tag)
            raise SchemaValidationError(
                [f"unrecognized {self.label} {received} (expected {expected})"]
            )
        return tag, self.variants[tag]

    def validate(self, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        arguments = _ensure_mapping(arguments)
        tag, schema = self.select(arguments)
        validated = schema.validate(arguments)
        return {self.discriminator: tag, **validated}

    def properties(self) -> Dict[str, JSONSchema]:
        merged: Dict[str, JSONSchema] = {
            self.discriminator: {
                "type": "string",
                "enum": self.tags,
                "description": self.description or f"Variant selector: {', '.join(self.tags)}",
            }
        }
        owners: Dict[str, List[str]] = {}
        descriptions: Dict[str, List[str]] = {}

        for tag, schema in self.variants.items():
            for name, descriptor in schema.properties().items():
                owners.setdefault(name, []).append(tag)
                if descriptor.get("description"):
                    descriptions.setdefault(name, []).append(f"{tag}: {descriptor['description']}")

                if name not in merged:
                    merged[name] = dict(descriptor)
                    continue

                existing = merged[name]
                if "enum" in existing and "enum" in descriptor:
                    existing["enum"] = existing["enum"] + [
                        value for value in descriptor["enum"] if value not in existing["enum"]
                    ]

        for name, tags in owners.items():
            if len(tags) > 1 and len(descriptions.get(name, [])) > 1:
                merged[name]["description"] = "; ".join(descriptions[name])
            elif len(tags) == 1 and len(self.variants) > 1:
                base = merged[name].get("description", "")
                merged[name]["description"] = f"{base} ({tags[0]} only)".strip()

        return merged

    def required(self) -> List[str]:
        """Discriminator plus parameters every variant requires."""
        per_variant = [set(schema.required()) for schema in self.variants.values()]
        common = set.intersection(*per_variant)
        first = next(iter(self.variants.values()))
        return [self.discriminator] + [name for name in first.required() if name in common]
