# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""JSON Schema validation of loaded configuration.

Validation is delegated to jsonschema. The validator class is picked from
the schema's ``$schema`` keyword, falling back to Draft 7.

Schemas are checked in strict mode: besides the metaschema check, every
keyword anywhere in the schema tree must be one the validator knows or a
recognized annotation. A typo such as ``"requried"`` therefore fails loudly
instead of silently validating nothing.

Failures map to two messages:

- "bad schema": the schema is malformed, uses an unknown keyword, or holds a
  ``$ref`` that cannot be resolved. Labels are ``{"message"}``, or
  ``{"reference", "schema", "message"}`` for unresolvable references.
- "bad attribute": the configuration does not satisfy the schema. Only the
  first error jsonschema produces is reported, with labels
  ``{"instancePath", "keyword", "params", "schemaPath", "message"}``.
  Paths are JSON Pointers; params are structured per keyword
  (``{"missingProperty": "age"}`` for ``required``, and so on).

Example:
    Inspecting a failed validation:
        ```python
        from seedconf import LoadingError, load

        try:
            load(file_path="app.json", schema={"required": ["port"]})
        except LoadingError as err:
            print(err.labels["params"])  # {'missingProperty': 'port'}
        ```
"""

from __future__ import annotations

from collections.abc import Iterator
import re
from typing import Any
from urllib.parse import urldefrag

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import SchemaError, ValidationError
from referencing import Registry
from referencing.exceptions import PointerToNowhere, Unresolvable

from seedconf.exceptions import BAD_ATTRIBUTE, BAD_SCHEMA, LoadFailure
from seedconf.logging import Logger, get_global_logger

__all__ = ["validate"]

# Keywords that carry no assertion but are legal in a schema
ANNOTATION_KEYWORDS = frozenset(
    {
        "$schema",
        "$id",
        "id",
        "$comment",
        "$anchor",
        "$dynamicAnchor",
        "$recursiveAnchor",
        "$vocabulary",
        "title",
        "description",
        "default",
        "examples",
        "definitions",
        "$defs",
        "then",
        "else",
        "readOnly",
        "writeOnly",
        "deprecated",
        "contentMediaType",
        "contentEncoding",
        "contentSchema",
    }
)

# Where subschemas live, by shape
_SCHEMA_VALUED = (
    "additionalItems",
    "additionalProperties",
    "contains",
    "contentSchema",
    "else",
    "if",
    "not",
    "propertyNames",
    "then",
    "unevaluatedItems",
    "unevaluatedProperties",
)
_SCHEMA_LISTS = ("allOf", "anyOf", "oneOf", "prefixItems")
_SCHEMA_MAPS = ("$defs", "definitions", "dependentSchemas", "patternProperties", "properties")

_COMPARISONS = {
    "minimum": ">=",
    "maximum": "<=",
    "exclusiveMinimum": ">",
    "exclusiveMaximum": "<",
}
_LIMITS = frozenset(
    {"minLength", "maxLength", "minItems", "maxItems", "minProperties", "maxProperties"}
)


def _subschemas(schema: dict[str, Any]) -> Iterator[Any]:
    for keyword in _SCHEMA_VALUED:
        if keyword in schema:
            yield schema[keyword]
    for keyword in _SCHEMA_LISTS:
        if isinstance(schema.get(keyword), list):
            yield from schema[keyword]
    for keyword in _SCHEMA_MAPS:
        if isinstance(schema.get(keyword), dict):
            yield from schema[keyword].values()

    items = schema.get("items")
    if isinstance(items, list):
        yield from items
    elif items is not None:
        yield items

    # draft 7 "dependencies" mixes subschemas and property-name arrays
    dependencies = schema.get("dependencies")
    if isinstance(dependencies, dict):
        for dependency in dependencies.values():
            if isinstance(dependency, dict):
                yield dependency


def _find_unknown_keyword(schema: Any, known: frozenset[str]) -> str | None:
    """Return the first keyword in the schema tree that is not known."""
    if not isinstance(schema, dict):
        return None
    for keyword in schema:
        if keyword not in known:
            return keyword
    for subschema in _subschemas(schema):
        unknown = _find_unknown_keyword(subschema, known)
        if unknown is not None:
            return unknown
    return None


def _json_pointer(parts: Any) -> str:
    return "".join(
        "/" + str(part).replace("~", "~0").replace("/", "~1") for part in parts
    )


def _additional_properties(error: ValidationError) -> list[str]:
    instance = error.instance if isinstance(error.instance, dict) else {}
    schema = error.schema if isinstance(error.schema, dict) else {}
    properties = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    return [
        name
        for name in instance
        if name not in properties
        and not any(re.search(pattern, name) for pattern in patterns)
    ]


def _params(error: ValidationError) -> dict[str, Any]:
    """Structured parameters describing a validation error."""
    keyword = error.validator
    value = error.validator_value

    if keyword == "required":
        instance = error.instance if isinstance(error.instance, dict) else {}
        missing = [name for name in value if name not in instance]
        return {"missingProperty": missing[0]} if missing else {}
    if keyword == "type":
        return {"type": value}
    if keyword == "enum":
        return {"allowedValues": value}
    if keyword == "const":
        return {"allowedValue": value}
    if keyword in _COMPARISONS:
        return {"comparison": _COMPARISONS[keyword], "limit": value}
    if keyword in _LIMITS:
        return {"limit": value}
    if keyword in ("pattern", "format", "multipleOf"):
        return {keyword: value}
    if keyword == "additionalProperties":
        extras = _additional_properties(error)
        return {"additionalProperty": extras[0]} if extras else {}
    return {}


def _attribute_labels(error: ValidationError) -> dict[str, Any]:
    return {
        "instancePath": _json_pointer(error.absolute_path),
        "keyword": error.validator,
        "params": _params(error),
        "schemaPath": "#" + _json_pointer(error.absolute_schema_path),
        "message": error.message,
    }


def _reference_labels(err: Unresolvable) -> dict[str, Any]:
    # jsonschema wraps the resolver error; the resolver's own error is the cause
    cause = err.__cause__ if isinstance(err.__cause__, Unresolvable) else err
    if isinstance(cause, PointerToNowhere):
        reference = f"#{cause.ref}"
        schema_uri = cause.resource.id() or ""
    else:
        reference = cause.ref
        schema_uri = urldefrag(cause.ref).url
    return {"reference": reference, "schema": schema_uri, "message": str(cause)}


def validate(value: Any, schema: dict[str, Any], logger: Logger | None = None) -> None:
    """Validate a configuration value against a JSON Schema.

    Args:
        value: Parsed configuration.
        schema: JSON Schema. ``{}`` accepts any value.
        logger: Optional logger; falls back to the global logger.

    Raises:
        LoadFailure: "bad schema" or "bad attribute".
    """
    if logger is None:
        logger = get_global_logger()

    dialect = schema.get("$schema")
    if "$schema" in schema and not isinstance(dialect, str):
        raise LoadFailure(
            BAD_SCHEMA, {"message": f"$schema must be a string, not {dialect!r}"}
        )

    cls = validators.validator_for(schema, default=Draft7Validator)
    logger.debug("SCHEMA", f"Using {cls.__name__}")

    try:
        cls.check_schema(schema)
    except SchemaError as err:
        raise LoadFailure(BAD_SCHEMA, {"message": err.message}) from err

    unknown = _find_unknown_keyword(schema, frozenset(cls.VALIDATORS) | ANNOTATION_KEYWORDS)
    if unknown is not None:
        raise LoadFailure(
            BAD_SCHEMA, {"message": f'strict mode: unknown keyword: "{unknown}"'}
        )

    # empty registry: remote references are never fetched
    validator = cls(schema, format_checker=cls.FORMAT_CHECKER, registry=Registry())
    try:
        error = next(iter(validator.iter_errors(value)), None)
    except Unresolvable as err:
        raise LoadFailure(BAD_SCHEMA, _reference_labels(err)) from err

    if error is not None:
        labels = _attribute_labels(error)
        logger.verbose(
            "SCHEMA", f"Rejected at '{labels['instancePath']}': {error.message}"
        )
        raise LoadFailure(BAD_ATTRIBUTE, labels)

    logger.verbose("SCHEMA", "Configuration satisfies schema")
