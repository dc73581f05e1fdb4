"""Enum catalog: every enum-bearing schema in the document, named once."""

from typing import Dict, Iterable, Optional, Set

from ..ir.collections import OrderedMap
from ..ir.components import (
    Component,
    HeaderComponent,
    ParameterComponent,
    RequestBodyComponent,
    ResponseComponent,
    SchemaComponent,
)
from ..ir.document import IREnum
from ..ir.operations import Operation, RequestBody, Response
from ..ir.schema import Schema


class EnumCatalogBuilder:
    """
    Collects enums in a single traversal of components then operations.

    A schema is named after its component, property or parameter when one
    is known, else `Enum_<n>`. A name that is already taken gets a numeric
    suffix.
    """

    def __init__(self):
        self._enums: Dict[str, IREnum] = {}
        self._visited: Set[int] = set()

    def build(self, components: Iterable[Component], operations: Iterable[Operation]) -> OrderedMap:
        for component in components:
            self._visit_component(component)
        for operation in operations:
            self._visit_operation(operation)
        return OrderedMap(self._enums)

    # ---------- traversal ----------

    def _visit_component(self, component: Component) -> None:
        if isinstance(component, SchemaComponent):
            self._visit_schema(component.schema, component.name, component.name)
        elif isinstance(component, ParameterComponent):
            self._visit_schema(component.parameter.schema, component.parameter.name)
        elif isinstance(component, RequestBodyComponent):
            self._visit_request_body(component.request_body)
        elif isinstance(component, ResponseComponent):
            self._visit_response(component.response, component.name)
        elif isinstance(component, HeaderComponent):
            if component.header.schema is not None:
                self._visit_schema(component.header.schema, component.name)

    def _visit_operation(self, operation: Operation) -> None:
        for parameter in operation.parameters:
            self._visit_schema(parameter.schema, parameter.name)
        if operation.request_body is not None:
            self._visit_request_body(operation.request_body)
        for response in operation.responses:
            self._visit_response(response)

    def _visit_request_body(self, request_body: RequestBody) -> None:
        for media in request_body.content.values():
            if media.schema is not None:
                self._visit_schema(media.schema)

    def _visit_response(self, response: Response, name_hint: Optional[str] = None) -> None:
        for media in (response.content or {}).values():
            if media.schema is not None:
                self._visit_schema(media.schema, name_hint)
        for header_name, header in (response.headers or {}).items():
            if header.schema is not None:
                self._visit_schema(header.schema, header_name)

    def _visit_schema(self, schema: Schema, name_hint: Optional[str] = None, owner: Optional[str] = None) -> None:
        stack = [(schema, name_hint)]
        while stack:
            node, hint = stack.pop()
            if id(node) in self._visited:
                continue
            self._visited.add(id(node))

            if node.enum:
                self._register(node, hint, owner)

            children = []
            for child_path, child in node.children():
                # Only property names are meaningful hints below the root
                if child_path.startswith("properties/"):
                    children.append((child, child_path[len("properties/"):]))
                else:
                    children.append((child, None))
            stack.extend(reversed(children))

    # ---------- naming ----------

    def _register(self, schema: Schema, name_hint: Optional[str], owner: Optional[str]) -> None:
        base = name_hint or f"Enum_{len(self._enums) + 1}"
        name = base
        suffix = 2
        while name in self._enums:
            name = f"{base}_{suffix}"
            suffix += 1
        self._enums[name] = IREnum(
            name=name,
            values=schema.enum,
            description=schema.description,
            owner=owner,
            schema=schema,
        )


def build_enum_catalog(components: Iterable[Component], operations: Iterable[Operation]) -> OrderedMap:
    return EnumCatalogBuilder().build(components, operations)
