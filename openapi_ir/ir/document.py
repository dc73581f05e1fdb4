"""The complete IR document, its dependency graph and enum catalog."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from .collections import OrderedMap
from .components import Component, SchemaComponent
from .operations import Operation, SecurityRequirement
from .pointers import ComponentKind
from .schema import Schema

IR_VERSION = "1.0.0"


@dataclass(frozen=True)
class DependencyNode:
    name: str
    dependencies: Tuple[str, ...] = ()
    dependents: Tuple[str, ...] = ()
    depth: int = 0
    is_circular: bool = False


@dataclass(frozen=True)
class DependencyGraph:
    """
    Schema-to-schema reference graph.

    `circular_references` holds one tuple per detected cycle, in DFS order
    starting from the node where the cycle was entered.
    Depth of a cyclic node is advisory only.
    """
    nodes: OrderedMap = field(default_factory=OrderedMap)
    topological_order: Tuple[str, ...] = ()
    circular_references: Tuple[Tuple[str, ...], ...] = ()

    def node(self, name: str) -> Optional[DependencyNode]:
        return self.nodes.get(name)

    def depth(self, name: str) -> int:
        return self.nodes[name].depth

    @property
    def has_cycles(self) -> bool:
        return bool(self.circular_references)

    def edges(self) -> Iterator[Tuple[str, str]]:
        """Yield (dependent, dependency) pairs."""
        for name, node in self.nodes.items():
            for dependency in node.dependencies:
                yield name, dependency


@dataclass(frozen=True)
class IREnum:
    name: str
    values: Tuple[Any, ...]
    description: Optional[str] = None
    # Schema component the enum was found in, None for operation-level enums
    owner: Optional[str] = None
    schema: Optional[Schema] = None


@dataclass(frozen=True)
class Document:
    openapi_version: str
    info: Dict[str, Any]
    version: str = IR_VERSION
    servers: Tuple[Dict[str, Any], ...] = ()
    components: Tuple[Component, ...] = ()
    operations: Tuple[Operation, ...] = ()
    dependency_graph: DependencyGraph = field(default_factory=DependencyGraph)
    schema_names: Tuple[str, ...] = ()
    enums: OrderedMap = field(default_factory=OrderedMap)
    security: Optional[Tuple[SecurityRequirement, ...]] = None
    tags: Optional[Tuple[Dict[str, Any], ...]] = None
    external_docs: Optional[Dict[str, Any]] = None
    webhooks: Optional[Dict[str, Any]] = None
    json_schema_dialect: Optional[str] = None
    extensions: Optional[Dict[str, Any]] = None

    @property
    def is_openapi_31(self) -> bool:
        return self.openapi_version.startswith("3.1")

    def components_of(self, kind: ComponentKind) -> Tuple[Component, ...]:
        kind = ComponentKind(kind)
        return tuple(component for component in self.components if component.kind is kind)

    def schema_component(self, name: str) -> Optional[SchemaComponent]:
        """The schema component called `name`; standard location wins over bundles."""
        found = None
        for component in self.components_of(ComponentKind.SCHEMA):
            if component.name != name:
                continue
            if component.bundle_key is None:
                return component
            if found is None:
                found = component
        return found

    def schema(self, name: str) -> Optional[Schema]:
        component = self.schema_component(name)
        return component.schema if component is not None else None

    def operation(self, method: str, path: str) -> Optional[Operation]:
        for operation in self.operations:
            if operation.method == method.lower() and operation.path == path:
                return operation
        return None

    def operation_by_id(self, operation_id: str) -> Optional[Operation]:
        for operation in self.operations:
            if operation.operation_id == operation_id:
                return operation
        return None
