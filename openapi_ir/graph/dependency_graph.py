"""
Schema dependency graph using NetworkX.

Nodes are schema component names. An edge `A -> B` in DependencyNode terms
means "A references B". The NetworkX graph stores the reverse direction
(dependency -> dependent) so that a topological sort yields dependencies
first.

Phases:
1. Edge extraction: walk each component's Schema tree, collecting `$ref`
   targets without entering the referenced bodies.
2. Order & depth: topological sort over the strongly connected components;
   each node gets its depth as soon as it is emitted.
3. Cycle detection: DFS with a recursion-stack set and a path stack.
4. Dependents: inverted edges.
"""

from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

import networkx as nx

from ..ir.collections import OrderedMap
from ..ir.document import DependencyGraph, DependencyNode
from ..ir.pointers import parse_component_ref
from ..ir.schema import Schema
from ..ir_logging import get_logger

logger = get_logger(__name__)


def extract_references(schema: Schema) -> Tuple[str, ...]:
    """Names of the schemas referenced anywhere in `schema`, first occurrence order."""
    names: List[str] = []
    for node in schema.walk():
        if node.ref is None:
            continue
        name = parse_component_ref(node.ref).name
        if name not in names:
            names.append(name)
    return tuple(names)


def _detect_cycles(names: Sequence[str], dependencies: Mapping[str, Tuple[str, ...]]) -> List[Tuple[str, ...]]:
    """
    Iterative DFS. Meeting a node that is on the recursion stack records the
    path slice from that node's position to the top of the stack.
    """
    cycles: List[Tuple[str, ...]] = []
    visited: Set[str] = set()

    for start in names:
        if start in visited:
            continue
        visited.add(start)
        path = [start]
        on_stack = {start}
        pending = [iter(dependencies[start])]

        while pending:
            next_name = next(pending[-1], None)
            if next_name is None:
                pending.pop()
                on_stack.discard(path.pop())
                continue
            if next_name in on_stack:
                cycles.append(tuple(path[path.index(next_name):]))
            elif next_name not in visited:
                visited.add(next_name)
                path.append(next_name)
                on_stack.add(next_name)
                pending.append(iter(dependencies[next_name]))

    return cycles


def _topological_order(graph: nx.DiGraph, position: Mapping[str, int]) -> List[str]:
    """
    Dependencies first. Members of a cycle are emitted together, in
    declaration order; ties are broken by declaration order too.
    """
    components = list(nx.strongly_connected_components(graph))
    condensed = nx.condensation(graph, scc=components)

    def first_position(component_id):
        return min(position[name] for name in condensed.nodes[component_id]["members"])

    order: List[str] = []
    for component_id in nx.lexicographical_topological_sort(condensed, key=first_position):
        members = condensed.nodes[component_id]["members"]
        order.extend(sorted(members, key=position.__getitem__))
    return order


def build_dependency_graph(schema_names: Sequence[str], schemas: Mapping[str, Schema]) -> DependencyGraph:
    """
    Build the DependencyGraph for the given schema components.

    Args:
        schema_names: component names in declaration order
        schemas: component name -> Schema

    References to names outside `schema_names` are ignored.
    """
    names = list(dict.fromkeys(schema_names))
    position = {name: index for index, name in enumerate(names)}
    known = set(names)

    dependencies: Dict[str, Tuple[str, ...]] = {
        name: tuple(ref for ref in extract_references(schemas[name]) if ref in known)
        for name in names
    }

    graph = nx.DiGraph()
    graph.add_nodes_from(names)
    for name, refs in dependencies.items():
        for ref in refs:
            graph.add_edge(ref, name)

    depth: Dict[str, int] = {}
    order = _topological_order(graph, position)
    for name in order:
        # Cyclic dependencies not placed yet count as depth 0
        refs = dependencies[name]
        depth[name] = 1 + max(depth.get(ref, 0) for ref in refs) if refs else 0

    cycles = _detect_cycles(names, dependencies)
    circular = _circular_names(graph)

    dependents: Dict[str, List[str]] = {name: [] for name in names}
    for name in names:
        for ref in dependencies[name]:
            if name not in dependents[ref]:
                dependents[ref].append(name)

    nodes = OrderedMap(
        (name, DependencyNode(
            name=name,
            dependencies=dependencies[name],
            dependents=tuple(dependents[name]),
            depth=depth[name],
            is_circular=name in circular,
        ))
        for name in names
    )

    logger.debug(
        f"[GRAPH] {len(names)} schemas, {graph.number_of_edges()} edges, {len(cycles)} cycles"
    )
    return DependencyGraph(
        nodes=nodes,
        topological_order=tuple(order),
        circular_references=tuple(cycles),
    )


def _circular_names(graph: nx.DiGraph) -> Set[str]:
    circular: Set[str] = set()
    for component in nx.strongly_connected_components(graph):
        if len(component) > 1:
            circular.update(component)
    circular.update(name for name in graph.nodes if graph.has_edge(name, name))
    return circular


def cycle_groups(graph: DependencyGraph) -> Dict[str, Tuple[str, ...]]:
    """
    circular node name -> names in its strongly connected component (itself
    included), in declaration order.
    """
    position = {name: index for index, name in enumerate(graph.nodes)}
    groups: Dict[str, Tuple[str, ...]] = {}
    for component in nx.strongly_connected_components(to_networkx(graph)):
        members = tuple(sorted(component, key=position.__getitem__))
        for name in members:
            if graph.nodes[name].is_circular:
                groups[name] = members
    return groups


def to_networkx(graph: DependencyGraph) -> nx.DiGraph:
    """The graph as a NetworkX DiGraph with dependency -> dependent edges."""
    digraph = nx.DiGraph()
    digraph.add_nodes_from(graph.nodes)
    for name, dependency in graph.edges():
        digraph.add_edge(dependency, name)
    return digraph


def export_mermaid(graph: DependencyGraph, names: Iterable[str] = None) -> str:
    """
    Mermaid flowchart of the schema graph, edges pointing from a schema to
    the schemas it references. Circular nodes are highlighted.
    """
    selected = list(names) if names is not None else list(graph.nodes)
    selected_set = set(selected)

    lines = []
    lines.append("```mermaid")
    lines.append("flowchart TD")
    lines.append("")
    lines.append("    classDef schema fill:#fff,stroke:#333,stroke-width:1px;")
    lines.append("    classDef circular fill:#ffe0e0,stroke:#b30000,stroke-width:1px;")
    lines.append("")

    for name in selected:
        node = graph.nodes[name]
        style = "circular" if node.is_circular else "schema"
        lines.append(f"    {_mermaid_id(name)}[{name}]:::{style}")

    lines.append("")
    for name in selected:
        for dependency in graph.nodes[name].dependencies:
            if dependency in selected_set:
                lines.append(f"    {_mermaid_id(name)} --> {_mermaid_id(dependency)}")

    lines.append("```")
    return "\n".join(lines)


def _mermaid_id(name: str) -> str:
    return "".join(ch if ch.isalnum() else "_" for ch in name) or "_"
