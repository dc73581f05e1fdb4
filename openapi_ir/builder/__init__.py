"""
OpenAPI -> IR builder.

`build_document` is the single entry point: it lowers components and
operations, builds the schema dependency graph, copies each node's graph
summary into its schema's metadata and collects the enum catalog.
"""

from collections.abc import Mapping
from dataclasses import replace
from typing import Dict, List, Tuple

from ..config import IRSettings
from ..ir.components import Component, SchemaComponent
from ..ir.document import DependencyGraph, Document
from ..ir.pointers import BUNDLE_KEY
from ..ir.schema import DependencyInfo
from ..ir_logging import get_logger
from ..graph import build_dependency_graph, cycle_groups
from .context import BuildContext
from .components import build_components
from .enums import build_enum_catalog
from .operations import build_operations, build_security
from .parameters import build_parameter
from .request_body import build_request_body
from .responses import build_response
from .schemas import build_schema
from .utils import extract_extensions, opaque, opaque_or_none, tuple_or_none

logger = get_logger(__name__)


def graph_schemas(components: Tuple[Component, ...]) -> Dict[str, SchemaComponent]:
    """
    Schema components that take part in the graph, keyed by name.

    A bundled schema whose name is already taken by a standard schema keeps
    its component but stays out of the graph.
    """
    chosen: Dict[str, SchemaComponent] = {}
    for component in components:
        if not isinstance(component, SchemaComponent):
            continue
        current = chosen.get(component.name)
        if current is None:
            chosen[component.name] = component
            continue
        if current.bundle_key is not None and component.bundle_key is None:
            chosen[component.name], component = component, current
        logger.warning(
            f"[IR] schema name '{component.name}' is defined more than once; "
            f"the copy from x-ext '{component.bundle_key}' is not part of the dependency graph"
        )
    return chosen


def attach_graph_metadata(components: Tuple[Component, ...], chosen: Dict[str, SchemaComponent],
                          graph: DependencyGraph) -> Tuple[Component, ...]:
    """Copy dependency info and cycle membership into each graphed schema's metadata."""
    groups = cycle_groups(graph)
    attached: List[Component] = []
    for component in components:
        if isinstance(component, SchemaComponent) and chosen.get(component.name) is component:
            node = graph.nodes[component.name]
            metadata = replace(
                component.schema.metadata,
                dependency_info=DependencyInfo(
                    references=node.dependencies,
                    referenced_by=node.dependents,
                    depth=node.depth,
                ),
                circular_references=groups.get(component.name, ()),
            )
            component = replace(component, schema=replace(component.schema, metadata=metadata))
        attached.append(component)
    return tuple(attached)


def build_document(document: Mapping, settings: IRSettings = None) -> Document:
    """
    Build the IR for one parsed OpenAPI document.

    The input is never mutated. Every per-build cache lives in the
    BuildContext created here and is dropped on return.

    Raises:
        IRBuildError: any reference, parameter or nesting failure; the
            build is aborted and no partial Document is returned
    """
    settings = settings or IRSettings()
    ctx = BuildContext.for_document(document)

    components = build_components(ctx)
    operations = build_operations(document.get("paths"), ctx)

    chosen = graph_schemas(components)
    schema_names = tuple(chosen)
    graph = build_dependency_graph(schema_names, {name: c.schema for name, c in chosen.items()})
    components = attach_graph_metadata(components, chosen, graph)

    enums = build_enum_catalog(components, operations)

    extensions = extract_extensions(document) or {}
    extensions.pop(BUNDLE_KEY, None)

    ir = Document(
        version=settings.ir_version,
        openapi_version=str(document.get("openapi", "3.0.0")),
        info=opaque(document.get("info") or {}),
        servers=tuple_or_none(document.get("servers")) or (),
        components=components,
        operations=operations,
        dependency_graph=graph,
        schema_names=schema_names,
        enums=enums,
        security=build_security(document.get("security")),
        tags=tuple_or_none(document.get("tags")),
        external_docs=opaque_or_none(document, "externalDocs"),
        webhooks=opaque_or_none(document, "webhooks"),
        json_schema_dialect=document.get("jsonSchemaDialect"),
        extensions=extensions or None,
    )

    logger.info(
        f"[IR] {ir.info.get('title', '<untitled>')}: {len(schema_names)} schemas, "
        f"{len(operations)} operations, {len(graph.circular_references)} cycles, "
        f"{len(enums)} enums"
    )
    return ir


__all__ = [
    "BuildContext",
    "build_document",
    "build_schema",
    "build_parameter",
    "build_request_body",
    "build_response",
    "build_components",
    "build_operations",
    "build_enum_catalog",
]
