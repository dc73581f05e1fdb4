"""
Structural checks over a built Document.

These are the construction invariants of the IR, not OpenAPI validation:
a Document produced by the builder should always pass.
"""

from dataclasses import replace
from typing import Iterator, List, NamedTuple, Set, Tuple

from .components import SchemaComponent
from .document import Document
from .pointers import parse_component_ref
from .schema import Metadata, PresenceChain, Schema

_BLANK = Metadata()


class ValidationIssue(NamedTuple):
    location: str
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


def _schema_roots(document: Document) -> Iterator[Tuple[str, Schema]]:
    for component in document.components:
        if isinstance(component, SchemaComponent):
            yield f"components/schemas/{component.name}", component.schema
    for operation in document.operations:
        base = f"paths/{operation.path}/{operation.method}"
        for parameter in operation.parameters:
            yield f"{base}/parameters/{parameter.location}/{parameter.name}", parameter.schema
        if operation.request_body is not None:
            for media_type, media in operation.request_body.content.items():
                if media.schema is not None:
                    yield f"{base}/requestBody/{media_type}", media.schema
        for response in operation.responses:
            for media_type, media in (response.content or {}).items():
                if media.schema is not None:
                    yield f"{base}/responses/{response.status_code}/{media_type}", media.schema


def _walk_with_paths(root: Schema, base: str) -> Iterator[Tuple[str, Schema]]:
    stack = [(base, root)]
    while stack:
        location, node = stack.pop()
        yield location, node
        for child_path, child in node.children():
            stack.append((f"{location}/{child_path}", child))


def _check_node(location: str, node: Schema, schema_names: Set[str]) -> Iterator[ValidationIssue]:
    metadata = node.metadata
    expected = PresenceChain.derive(metadata.required, metadata.nullable)
    if metadata.presence is not expected:
        yield ValidationIssue(location, f"presence {metadata.presence.value} should be {expected.value}")

    if node.is_reference:
        if replace(node, ref=None, metadata=_BLANK) != Schema(metadata=_BLANK):
            yield ValidationIssue(location, f"reference node '{node.ref}' carries structural fields")
        name = parse_component_ref(node.ref).name
        if name not in schema_names:
            yield ValidationIssue(location, f"reference to unknown schema '{name}'")
        return

    if node.properties is not None:
        required = set(node.required)
        for name, child in node.properties.items():
            if child.metadata.required != (name in required):
                yield ValidationIssue(
                    f"{location}/properties/{name}",
                    f"metadata.required={child.metadata.required} disagrees with the parent's required list",
                )


def validate_document(document: Document) -> List[ValidationIssue]:
    """Return every invariant violation found; an empty list means valid."""
    issues: List[ValidationIssue] = []
    schema_names = set(document.schema_names)

    for base, root in _schema_roots(document):
        for location, node in _walk_with_paths(root, base):
            issues.extend(_check_node(location, node, schema_names))

    graph_names = set(document.dependency_graph.nodes)
    if graph_names != schema_names:
        missing = sorted(schema_names - graph_names)
        extra = sorted(graph_names - schema_names)
        issues.append(ValidationIssue(
            "dependency_graph",
            f"nodes do not match schema names (missing {missing}, extra {extra})",
        ))
    for name, dependency in document.dependency_graph.edges():
        if dependency not in graph_names:
            issues.append(ValidationIssue(f"dependency_graph/{name}", f"edge to unknown node '{dependency}'"))

    return issues
