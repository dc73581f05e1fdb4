"""
Component lowering, one handler per ComponentKind.

Schemas found in `x-ext` side-maps become schema components tagged with
their bundle key; other side-map kinds are only reachable through
references.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Tuple

from ..ir.components import (
    CallbackComponent,
    Component,
    ExampleComponent,
    HeaderComponent,
    LinkComponent,
    ParameterComponent,
    PathItemComponent,
    RequestBodyComponent,
    ResponseComponent,
    SchemaComponent,
    SecuritySchemeComponent,
)
from ..ir.pointers import ComponentKind
from ..ir_logging import get_logger
from .context import BuildContext
from .parameters import build_parameter
from .request_body import build_request_body
from .responses import build_header, build_response
from .schemas import build_schema
from .utils import opaque

logger = get_logger(__name__)


def _schema(name: str, node: Any, ctx: BuildContext) -> Component:
    return SchemaComponent(name=name, schema=build_schema(node, ctx))


def _parameter(name: str, node: Any, ctx: BuildContext) -> Component:
    return ParameterComponent(name=name, parameter=build_parameter(node, ctx))


def _request_body(name: str, node: Any, ctx: BuildContext) -> Component:
    return RequestBodyComponent(name=name, request_body=build_request_body(node, ctx))


def _response(name: str, node: Any, ctx: BuildContext) -> Component:
    # A response component is not bound to a status code
    return ResponseComponent(name=name, response=build_response("", node, ctx))


def _header(name: str, node: Any, ctx: BuildContext) -> Component:
    return HeaderComponent(name=name, header=build_header(node, ctx))


def _verbatim(component_type) -> Callable[[str, Any, BuildContext], Component]:
    def build(name: str, node: Any, ctx: BuildContext) -> Component:
        return component_type(name, opaque(node))
    return build


COMPONENT_BUILDERS: Dict[ComponentKind, Callable[[str, Any, BuildContext], Component]] = {
    ComponentKind.SCHEMA: _schema,
    ComponentKind.PARAMETER: _parameter,
    ComponentKind.REQUEST_BODY: _request_body,
    ComponentKind.RESPONSE: _response,
    ComponentKind.HEADER: _header,
    ComponentKind.SECURITY_SCHEME: _verbatim(SecuritySchemeComponent),
    ComponentKind.LINK: _verbatim(LinkComponent),
    ComponentKind.CALLBACK: _verbatim(CallbackComponent),
    ComponentKind.PATH_ITEM: _verbatim(PathItemComponent),
    ComponentKind.EXAMPLE: _verbatim(ExampleComponent),
}


def build_components(ctx: BuildContext) -> Tuple[Component, ...]:
    """
    Lower `components.*` in ComponentKind order, then the bundled schemas.

    Within a kind, declaration order is kept.
    """
    components: List[Component] = []
    source = ctx.document.get("components") or {}

    for kind in ComponentKind:
        entries = source.get(kind.value) or {}
        builder = COMPONENT_BUILDERS[kind]
        for name, node in entries.items():
            component = builder(name, node, ctx.child("components", kind.value, name, required=False))
            components.append(component)
        if entries:
            logger.debug(f"[IR] {len(entries)} {kind.value}")

    components.extend(build_bundled_schemas(ctx))
    return tuple(components)


def build_bundled_schemas(ctx: BuildContext) -> List[SchemaComponent]:
    bundled: List[SchemaComponent] = []
    for bundle_key in ctx.resolver.bundle_keys():
        schemas = ctx.resolver.bundled_components(bundle_key, ComponentKind.SCHEMA)
        if not isinstance(schemas, Mapping):
            continue
        for name, node in schemas.items():
            schema_ctx = ctx.child("x-ext", bundle_key, "components", "schemas", name, required=False)
            bundled.append(SchemaComponent(
                name=name,
                schema=build_schema(node, schema_ctx),
                bundle_key=bundle_key,
            ))
        if schemas:
            logger.debug(f"[IR] {len(schemas)} bundled schemas from x-ext '{bundle_key}'")
    return bundled
