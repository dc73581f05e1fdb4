"""
Schema lowering: OpenAPI Schema Object (or $ref) -> IR Schema.

Lowering is structural. Constraints and annotations are copied as found;
the only normalisations are:
- `nullable: true` (3.0) and a `"null"` entry in a type array (3.1) both
  become Metadata.nullable;
- `default` moves into Metadata;
- `prefixItems` (3.1) and list-valued `items` both become a tuple `items`.
"""

from collections.abc import Mapping
from typing import Any, Optional, Tuple, Union

from ..errors import IRBuildError
from ..ir.collections import SchemaProperties
from ..ir.pointers import ComponentKind
from ..ir.schema import Metadata, Schema
from .context import BuildContext
from .utils import (
    extract_extensions,
    opaque,
    opaque_or_not_set,
    tuple_or_none,
    unique_tuple,
)

# OpenAPI keyword -> Schema field, copied without interpretation
_SCALAR_FIELDS = (
    ("format", "format"),
    ("title", "title"),
    ("description", "description"),
    ("minProperties", "min_properties"),
    ("maxProperties", "max_properties"),
    ("minItems", "min_items"),
    ("maxItems", "max_items"),
    ("uniqueItems", "unique_items"),
    ("minLength", "min_length"),
    ("maxLength", "max_length"),
    ("pattern", "pattern"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("exclusiveMinimum", "exclusive_minimum"),
    ("exclusiveMaximum", "exclusive_maximum"),
    ("multipleOf", "multiple_of"),
    ("deprecated", "deprecated"),
    ("readOnly", "read_only"),
    ("writeOnly", "write_only"),
)

_OPAQUE_FIELDS = (
    ("discriminator", "discriminator"),
    ("examples", "examples"),
    ("xml", "xml"),
    ("externalDocs", "external_docs"),
)

_COMPOSITIONS = (("allOf", "all_of"), ("oneOf", "one_of"), ("anyOf", "any_of"))


def _lower_type(raw_type: Any) -> Tuple[Union[str, Tuple[str, ...], None], bool]:
    """Split a `type` keyword into (type without null, has null)."""
    if raw_type is None:
        return None, False
    if isinstance(raw_type, str):
        return raw_type, raw_type == "null"
    types = unique_tuple(raw_type)
    non_null = tuple(t for t in types if t != "null")
    has_null = len(non_null) != len(types)
    if not non_null:
        return "null", has_null
    if len(non_null) == 1:
        return non_null[0], has_null
    return non_null, has_null


def build_reference(ref: str, ctx: BuildContext) -> Schema:
    """A reference node: the target is validated but never inlined."""
    pointer = ctx.resolver.check(ref, ComponentKind.SCHEMA, ctx.path)
    return Schema(metadata=Metadata.for_position(ctx.required), ref=pointer.ref)


def build_schema(node: Any, ctx: BuildContext) -> Schema:
    """
    Lower one schema node.

    Args:
        node: OpenAPI Schema Object, Reference Object or boolean schema
        ctx: build context; ctx.required is the presence of this position

    Raises:
        IRBuildError: on any reference failure below this node
    """
    if isinstance(node, bool):
        # true accepts anything, false accepts nothing
        metadata = Metadata.for_position(ctx.required)
        if node:
            return Schema(metadata=metadata)
        return Schema(metadata=metadata, not_=Schema(metadata=Metadata.for_position(False)))

    if not isinstance(node, Mapping):
        raise IRBuildError(f"Expected a schema object, got {type(node).__name__}", ctx.path)

    if "$ref" in node:
        # Sibling keywords of a $ref are not carried
        return build_reference(node["$ref"], ctx)

    schema_type, type_has_null = _lower_type(node.get("type"))
    nullable = bool(node.get("nullable", False)) or type_has_null
    default = opaque_or_not_set(node, "default")

    fields = {
        "metadata": Metadata.for_position(ctx.required, nullable, default),
        "type": schema_type,
    }

    for keyword, attr in _SCALAR_FIELDS:
        if keyword in node:
            fields[attr] = node[keyword]
    for keyword, attr in _OPAQUE_FIELDS:
        if keyword in node:
            fields[attr] = opaque(node[keyword])

    required = unique_tuple(node.get("required") or ())
    if required:
        fields["required"] = required

    if "properties" in node:
        fields["properties"] = _build_properties(node["properties"] or {}, required, ctx)

    if "additionalProperties" in node:
        additional = node["additionalProperties"]
        if isinstance(additional, bool):
            fields["additional_properties"] = additional
        else:
            fields["additional_properties"] = build_schema(
                additional, ctx.child("additionalProperties", required=False)
            )

    fields.update(_build_items(node, ctx))

    for keyword, attr in _COMPOSITIONS:
        if keyword in node:
            fields[attr] = tuple(
                build_schema(branch, ctx.child(keyword, index, required=True))
                for index, branch in enumerate(node[keyword] or ())
            )
    if "not" in node:
        fields["not_"] = build_schema(node["not"], ctx.child("not", required=False))

    if "enum" in node:
        fields["enum"] = tuple_or_none(node["enum"])
    fields["const"] = opaque_or_not_set(node, "const")
    fields["example"] = opaque_or_not_set(node, "example")
    fields["extensions"] = extract_extensions(node)

    return Schema(**fields)


def _build_properties(properties: Mapping, required: Tuple[str, ...], ctx: BuildContext) -> SchemaProperties:
    return SchemaProperties(
        (name, build_schema(child, ctx.child("properties", name, required=name in required)))
        for name, child in properties.items()
    )


def _build_items(node: Mapping, ctx: BuildContext) -> dict:
    fields = {}
    items = node.get("items")

    if "prefixItems" in node:
        fields["items"] = tuple(
            build_schema(child, ctx.child("prefixItems", index, required=False))
            for index, child in enumerate(node["prefixItems"] or ())
        )
        if items is not None:
            fields["additional_items"] = build_schema(items, ctx.child("items", required=False))
        return fields

    if isinstance(items, list):
        fields["items"] = tuple(
            build_schema(child, ctx.child("items", index, required=False))
            for index, child in enumerate(items)
        )
        if "additionalItems" in node:
            fields["additional_items"] = build_schema(
                node["additionalItems"], ctx.child("additionalItems", required=False)
            )
    elif items is not None:
        fields["items"] = build_schema(items, ctx.child("items", required=False))
    return fields


def build_optional_schema(node: Optional[Any], ctx: BuildContext) -> Optional[Schema]:
    if node is None:
        return None
    return build_schema(node, ctx)
