"""Request body lowering."""

from collections.abc import Mapping

from ..ir.collections import OrderedMap
from ..ir.operations import RequestBody
from ..ir.pointers import ComponentKind
from ..resolver import is_reference
from .context import BuildContext
from .media import build_content
from .utils import extract_extensions, kept_ref


def build_request_body(node: Mapping, ctx: BuildContext) -> RequestBody:
    """
    Lower a Request Body Object or a single-hop `$ref` to one.

    Media type schemas are required exactly when the body is.

    Raises:
        NestedReferenceNotAllowed: the referenced request body is itself a $ref
    """
    ref = None
    if is_reference(node):
        ref = node["$ref"]
        node = ctx.resolver.resolve(ref, ComponentKind.REQUEST_BODY, ctx.path, allow_nested=False)
        ref = kept_ref(ref)

    required = bool(node.get("required", False))
    content = build_content(node.get("content") or {}, ctx.child(required=required))
    return RequestBody(
        content=content if content is not None else OrderedMap(),
        required=required,
        description=node.get("description"),
        ref=ref,
        extensions=extract_extensions(node),
    )
