"""Schema dependency graph: ordering, depth and cycles."""

from .dependency_graph import (
    build_dependency_graph,
    cycle_groups,
    export_mermaid,
    extract_references,
    to_networkx,
)

__all__ = [
    "build_dependency_graph",
    "cycle_groups",
    "export_mermaid",
    "extract_references",
    "to_networkx",
]
