"""
IR Schema -> OpenAPI Schema Object.

Mirrors the builder field for field. Reference nodes are always written as a
bare `{"$ref": ...}`; nothing is inlined.
"""

import copy
from dataclasses import replace
from typing import Any, Dict, Optional

from ..errors import IRWriteError
from ..ir.schema import NOT_SET, Metadata, Schema

_BLANK_METADATA = Metadata()
_BARE = Schema(metadata=_BLANK_METADATA)

# Schema field -> OpenAPI keyword, in output order
_LEADING_FIELDS = (
    ("format", "format"),
    ("title", "title"),
    ("description", "description"),
)

_CONSTRAINT_FIELDS = (
    ("min_properties", "minProperties"),
    ("max_properties", "maxProperties"),
    ("min_items", "minItems"),
    ("max_items", "maxItems"),
    ("unique_items", "uniqueItems"),
    ("min_length", "minLength"),
    ("max_length", "maxLength"),
    ("pattern", "pattern"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("exclusive_minimum", "exclusiveMinimum"),
    ("exclusive_maximum", "exclusiveMaximum"),
    ("multiple_of", "multipleOf"),
)

_ANNOTATION_FIELDS = (
    ("deprecated", "deprecated"),
    ("read_only", "readOnly"),
    ("write_only", "writeOnly"),
)

_OPAQUE_FIELDS = (
    ("examples", "examples"),
    ("xml", "xml"),
    ("external_docs", "externalDocs"),
)

_COMPOSITIONS = (("all_of", "allOf"), ("one_of", "oneOf"), ("any_of", "anyOf"))


def _write_type(schema: Schema, openapi_31: bool, out: Dict[str, Any]) -> None:
    types = list(schema.primitive_types)
    nullable = schema.metadata.nullable

    if openapi_31 and nullable and types:
        if "null" not in types:
            types.append("null")
        out["type"] = types[0] if len(types) == 1 else types
        return

    if types:
        out["type"] = types[0] if len(types) == 1 else types
    if nullable and types != ["null"]:
        out["nullable"] = True


def write_schema(schema: Schema, openapi_31: bool = False) -> Dict[str, Any]:
    """
    Write one schema node.

    Args:
        schema: IR schema
        openapi_31: nullability as a type array (3.1) instead of `nullable` (3.0)

    Raises:
        IRWriteError: a reference node carries structural fields
    """
    if schema.is_reference:
        if replace(schema, ref=None, metadata=_BLANK_METADATA) != _BARE:
            raise IRWriteError(f"Reference node '{schema.ref}' carries structural fields")
        return {"$ref": schema.ref}

    out: Dict[str, Any] = {}
    _write_type(schema, openapi_31, out)

    for attr, keyword in _LEADING_FIELDS:
        value = getattr(schema, attr)
        if value is not None:
            out[keyword] = value

    if schema.required:
        out["required"] = list(schema.required)
    if schema.properties is not None:
        out["properties"] = {
            name: write_schema(child, openapi_31)
            for name, child in schema.properties.items()
        }
    if isinstance(schema.additional_properties, Schema):
        out["additionalProperties"] = write_schema(schema.additional_properties, openapi_31)
    elif schema.additional_properties is not None:
        out["additionalProperties"] = schema.additional_properties

    _write_items(schema, openapi_31, out)

    for attr, keyword in _COMPOSITIONS:
        branches = getattr(schema, attr)
        if branches is not None:
            out[keyword] = [write_schema(branch, openapi_31) for branch in branches]
    if schema.not_ is not None:
        out["not"] = write_schema(schema.not_, openapi_31)
    if schema.discriminator is not None:
        out["discriminator"] = copy.deepcopy(schema.discriminator)

    for attr, keyword in _CONSTRAINT_FIELDS:
        value = getattr(schema, attr)
        if value is not None:
            out[keyword] = value

    if schema.enum is not None:
        out["enum"] = copy.deepcopy(list(schema.enum))
    if schema.const is not NOT_SET:
        out["const"] = copy.deepcopy(schema.const)
    if schema.metadata.has_default:
        out["default"] = copy.deepcopy(schema.metadata.default)

    for attr, keyword in _ANNOTATION_FIELDS:
        value = getattr(schema, attr)
        if value is not None:
            out[keyword] = value
    if schema.example is not NOT_SET:
        out["example"] = copy.deepcopy(schema.example)
    for attr, keyword in _OPAQUE_FIELDS:
        value = getattr(schema, attr)
        if value is not None:
            out[keyword] = copy.deepcopy(value)

    if schema.extensions:
        out.update(copy.deepcopy(schema.extensions))
    return out


def _write_items(schema: Schema, openapi_31: bool, out: Dict[str, Any]) -> None:
    if isinstance(schema.items, tuple):
        out["prefixItems"] = [write_schema(item, openapi_31) for item in schema.items]
        if schema.additional_items is not None:
            out["items"] = write_schema(schema.additional_items, openapi_31)
    elif schema.items is not None:
        out["items"] = write_schema(schema.items, openapi_31)


def write_optional_schema(schema: Optional[Schema], openapi_31: bool = False) -> Optional[Dict[str, Any]]:
    if schema is None:
        return None
    return write_schema(schema, openapi_31)
