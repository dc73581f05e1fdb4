"""Response and response header lowering."""

from collections.abc import Mapping
from typing import Optional, Tuple

from ..ir.collections import OrderedMap
from ..ir.operations import Response, ResponseHeader
from ..ir.pointers import ComponentKind
from ..resolver import is_reference
from .context import BuildContext
from .media import build_content
from .schemas import build_schema
from .utils import extract_extensions, kept_ref, opaque_or_none, opaque_or_not_set


def build_header(node: Mapping, ctx: BuildContext) -> ResponseHeader:
    """Lower a Header Object, following `$ref`s into components.headers."""
    ref = None
    if is_reference(node):
        ref = node["$ref"]
        node = ctx.resolver.resolve(ref, ComponentKind.HEADER, ctx.path)
        ref = kept_ref(ref)

    required = node.get("required")
    header_ctx = ctx.child(required=bool(required))

    schema = None
    content_type = None
    if "schema" in node:
        schema = build_schema(node["schema"], header_ctx.child("schema"))
    elif node.get("content"):
        content_type, media = next(iter(node["content"].items()))
        if media and "schema" in media:
            schema = build_schema(media["schema"], header_ctx.child("content", content_type, "schema"))

    return ResponseHeader(
        schema=schema,
        description=node.get("description"),
        required=required,
        deprecated=node.get("deprecated"),
        example=opaque_or_not_set(node, "example"),
        examples=opaque_or_none(node, "examples"),
        style=node.get("style"),
        explode=node.get("explode"),
        content_type=content_type,
        ref=ref,
        extensions=extract_extensions(node),
    )


def build_headers(headers: Optional[Mapping], ctx: BuildContext) -> Optional[OrderedMap]:
    if headers is None:
        return None
    return OrderedMap(
        (name, build_header(header or {}, ctx.child("headers", name)))
        for name, header in headers.items()
    )


def build_response(status_code: str, node: Mapping, ctx: BuildContext) -> Response:
    """
    Lower a Response Object or a single-hop `$ref` to one.

    Raises:
        NestedReferenceNotAllowed: the referenced response is itself a $ref
    """
    ref = None
    if is_reference(node):
        ref = node["$ref"]
        node = ctx.resolver.resolve(ref, ComponentKind.RESPONSE, ctx.path, allow_nested=False)
        ref = kept_ref(ref)

    return Response(
        status_code=status_code,
        description=node.get("description"),
        content=build_content(node.get("content"), ctx.child(required=False)),
        headers=build_headers(node.get("headers"), ctx),
        links=opaque_or_none(node, "links"),
        ref=ref,
        extensions=extract_extensions(node),
    )


def build_responses(responses: Optional[Mapping], ctx: BuildContext) -> Tuple[Response, ...]:
    """Responses in declaration order; status codes are kept as strings."""
    if not responses:
        return ()
    return tuple(
        build_response(str(status_code), node or {}, ctx.child(str(status_code)))
        for status_code, node in responses.items()
        if not (isinstance(status_code, str) and status_code.startswith("x-"))
    )
