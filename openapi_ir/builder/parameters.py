"""Parameter lowering, including path-level parameter merging."""

from collections.abc import Mapping
from typing import Any, List, Sequence, Tuple

from ..errors import InvalidParameter
from ..ir.operations import Parameter
from ..ir.pointers import ComponentKind
from ..ir.schema import Metadata, Schema
from ..resolver import is_reference
from .context import BuildContext
from .schemas import build_schema
from .utils import extract_extensions, kept_ref, opaque_or_none, opaque_or_not_set


def build_parameter(node: Mapping, ctx: BuildContext) -> Parameter:
    """
    Lower a Parameter Object or a `$ref` to one.

    Path parameters are required unless they say otherwise.

    Raises:
        InvalidParameter: neither `schema` nor `content` is present
    """
    ref = None
    if is_reference(node):
        ref = node["$ref"]
        node = ctx.resolver.resolve(ref, ComponentKind.PARAMETER, ctx.path)
        ref = kept_ref(ref)

    name = node.get("name")
    location = node.get("in")
    required = bool(node.get("required", location == "path"))
    param_ctx = ctx.child(name or "<unnamed>", required=required)

    content_type = None
    if "schema" in node:
        schema = build_schema(node["schema"], param_ctx.child("schema"))
    elif node.get("content"):
        # A parameter's content map holds exactly one entry
        content_type, media = next(iter(node["content"].items()))
        media = media or {}
        if "schema" in media:
            schema = build_schema(media["schema"], param_ctx.child("content", content_type, "schema"))
        else:
            schema = Schema(metadata=Metadata.for_position(required))
    else:
        raise InvalidParameter(
            f"Parameter '{name}' in {location} has neither 'schema' nor 'content'",
            param_ctx.path, ref,
        )

    return Parameter(
        name=name,
        location=location,
        required=required,
        schema=schema,
        description=node.get("description"),
        deprecated=node.get("deprecated"),
        example=opaque_or_not_set(node, "example"),
        examples=opaque_or_none(node, "examples"),
        style=node.get("style"),
        explode=node.get("explode"),
        allow_reserved=node.get("allowReserved"),
        allow_empty_value=node.get("allowEmptyValue"),
        content_type=content_type,
        ref=ref,
        extensions=extract_extensions(node),
    )


def merge_parameters(path_level: Sequence[Parameter], operation_level: Sequence[Parameter]) -> Tuple[Parameter, ...]:
    """
    Path-level parameters first, unless the operation redefines the same
    (name, location); operation-level parameters keep their own order.
    """
    overridden = {parameter.key for parameter in operation_level}
    merged: List[Parameter] = [p for p in path_level if p.key not in overridden]
    merged.extend(operation_level)
    return tuple(merged)


def build_parameters(nodes: Any, ctx: BuildContext) -> Tuple[Parameter, ...]:
    return tuple(
        build_parameter(node, ctx.child(index))
        for index, node in enumerate(nodes or ())
    )
