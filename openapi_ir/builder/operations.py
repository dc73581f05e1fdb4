"""
Operation lowering.

One IR Operation per (path, method). Path-level parameters are merged into
each operation; path-level `$ref` parameters are additionally remembered so
the writer can put them back on the path item.
"""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any, List, Optional, Tuple

from ..ir.collections import OrderedMap
from ..ir.operations import HTTP_METHODS, Operation, SecurityRequirement, group_by_location
from ..ir_logging import get_logger
from ..resolver import is_reference
from .context import BuildContext
from .parameters import build_parameters, merge_parameters
from .request_body import build_request_body
from .responses import build_responses
from .utils import extract_extensions, kept_ref, opaque_or_none, tuple_or_none

logger = get_logger(__name__)


def build_security(requirements: Optional[Any]) -> Optional[Tuple[SecurityRequirement, ...]]:
    """
    Lower a security requirement list.

    Each requirement object keeps its AND-grouping of schemes; an empty
    object (anonymous access) stays an empty requirement.
    """
    if requirements is None:
        return None
    return tuple(
        SecurityRequirement(OrderedMap(
            (scheme, tuple(scopes or ()))
            for scheme, scopes in (requirement or {}).items()
        ))
        for requirement in requirements
    )


def build_operation(path: str, method: str, node: Mapping, path_item: Mapping, ctx: BuildContext) -> Operation:
    op_ctx = ctx.child(path, method, required=False)

    path_level = build_parameters(path_item.get("parameters"), ctx.child(path, "parameters"))
    # Referenced path-level parameters stay on the path item when written, so they lead
    path_level = tuple(sorted(path_level, key=lambda parameter: parameter.ref is None))
    path_level = tuple(
        replace(parameter, inherited=True) if parameter.ref is not None else parameter
        for parameter in path_level
    )
    operation_level = build_parameters(node.get("parameters"), op_ctx.child("parameters"))
    parameters = merge_parameters(path_level, operation_level)

    request_body = None
    if "requestBody" in node:
        request_body = build_request_body(node["requestBody"] or {}, op_ctx.child("requestBody"))

    path_item_refs = tuple(
        parameter["$ref"] for parameter in path_item.get("parameters") or ()
        if is_reference(parameter) and kept_ref(parameter["$ref"]) is not None
    )

    tags = node.get("tags")
    return Operation(
        method=method,
        path=path,
        parameters=parameters,
        parameters_by_location=group_by_location(parameters),
        responses=build_responses(node.get("responses"), op_ctx.child("responses")),
        operation_id=node.get("operationId"),
        summary=node.get("summary"),
        description=node.get("description"),
        tags=tuple(tags) if tags is not None else None,
        deprecated=node.get("deprecated"),
        request_body=request_body,
        security=build_security(node.get("security")),
        external_docs=opaque_or_none(node, "externalDocs"),
        callbacks=opaque_or_none(node, "callbacks"),
        servers=tuple_or_none(node.get("servers")),
        extensions=extract_extensions(node),
        path_item_summary=path_item.get("summary"),
        path_item_description=path_item.get("description"),
        path_item_servers=tuple_or_none(path_item.get("servers")),
        path_item_parameter_refs=path_item_refs,
    )


def build_operations(paths: Optional[Mapping], ctx: BuildContext) -> Tuple[Operation, ...]:
    """Operations in path order, then in HTTP method order within a path."""
    operations: List[Operation] = []
    for path, path_item in (paths or {}).items():
        if isinstance(path, str) and path.startswith("x-"):
            continue
        path_item = path_item or {}
        for method in HTTP_METHODS:
            node = path_item.get(method)
            if not isinstance(node, Mapping):
                continue
            operation = build_operation(path, method, node, path_item, ctx.child("paths"))
            logger.debug(f"[IR] operation {operation.key}")
            operations.append(operation)
    return tuple(operations)
