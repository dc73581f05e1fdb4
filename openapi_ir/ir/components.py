"""
Named, top-level IR entities.

Every component type declares its `kind`; the union below is closed and the
per-kind dispatch tables in the builder and writer are keyed by
ComponentKind, so a new kind has to be added in all three places.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from .operations import Parameter, RequestBody, Response, ResponseHeader
from .pointers import ComponentKind, ComponentPointer, component_ref
from .schema import Schema


@dataclass(frozen=True)
class SchemaComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.SCHEMA
    name: str
    schema: Schema
    # Hash key of the x-ext side-map this schema was bundled from
    bundle_key: Optional[str] = None

    @property
    def pointer(self) -> ComponentPointer:
        ref = component_ref(self.kind, self.name, self.bundle_key)
        return ComponentPointer(self.kind.value, self.name, ref, self.bundle_key)


@dataclass(frozen=True)
class ParameterComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.PARAMETER
    name: str
    parameter: Parameter


@dataclass(frozen=True)
class RequestBodyComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.REQUEST_BODY
    name: str
    request_body: RequestBody


@dataclass(frozen=True)
class ResponseComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.RESPONSE
    name: str
    response: Response


@dataclass(frozen=True)
class HeaderComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.HEADER
    name: str
    header: ResponseHeader


@dataclass(frozen=True)
class SecuritySchemeComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.SECURITY_SCHEME
    name: str
    scheme: Dict[str, Any]

    @property
    def scheme_type(self) -> Optional[str]:
        return self.scheme.get("type")


# Carried verbatim: the IR has no structured model for these

@dataclass(frozen=True)
class LinkComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.LINK
    name: str
    link: Dict[str, Any]


@dataclass(frozen=True)
class CallbackComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.CALLBACK
    name: str
    callback: Dict[str, Any]


@dataclass(frozen=True)
class PathItemComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.PATH_ITEM
    name: str
    path_item: Dict[str, Any]


@dataclass(frozen=True)
class ExampleComponent:
    kind: ClassVar[ComponentKind] = ComponentKind.EXAMPLE
    name: str
    example: Dict[str, Any]


Component = Union[
    SchemaComponent,
    ParameterComponent,
    RequestBodyComponent,
    ResponseComponent,
    HeaderComponent,
    SecuritySchemeComponent,
    LinkComponent,
    CallbackComponent,
    PathItemComponent,
    ExampleComponent,
]

COMPONENT_TYPES = {
    component_type.kind: component_type
    for component_type in (
        SchemaComponent,
        ParameterComponent,
        RequestBodyComponent,
        ResponseComponent,
        HeaderComponent,
        SecuritySchemeComponent,
        LinkComponent,
        CallbackComponent,
        PathItemComponent,
        ExampleComponent,
    )
}

# Name of the payload field on each component type
PAYLOAD_FIELDS = {
    ComponentKind.SCHEMA: "schema",
    ComponentKind.PARAMETER: "parameter",
    ComponentKind.REQUEST_BODY: "request_body",
    ComponentKind.RESPONSE: "response",
    ComponentKind.HEADER: "header",
    ComponentKind.SECURITY_SCHEME: "scheme",
    ComponentKind.LINK: "link",
    ComponentKind.CALLBACK: "callback",
    ComponentKind.PATH_ITEM: "path_item",
    ComponentKind.EXAMPLE: "example",
}


def component_payload(component: Component) -> Any:
    return getattr(component, PAYLOAD_FIELDS[component.kind])
