"""IR data model."""

from .collections import OrderedMap, SchemaProperties
from .components import (
    COMPONENT_TYPES,
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
from .document import IR_VERSION, DependencyGraph, DependencyNode, Document, IREnum
from .operations import (
    HTTP_METHODS,
    PARAMETER_LOCATIONS,
    MediaType,
    Operation,
    Parameter,
    RequestBody,
    Response,
    ResponseHeader,
    SecurityRequirement,
)
from .pointers import ComponentKind, ComponentPointer, component_ref, parse_component_ref
from .schema import NOT_SET, DependencyInfo, Metadata, PresenceChain, Schema

__all__ = [
    "OrderedMap",
    "SchemaProperties",
    "COMPONENT_TYPES",
    "CallbackComponent",
    "Component",
    "ExampleComponent",
    "HeaderComponent",
    "LinkComponent",
    "ParameterComponent",
    "PathItemComponent",
    "RequestBodyComponent",
    "ResponseComponent",
    "SchemaComponent",
    "SecuritySchemeComponent",
    "IR_VERSION",
    "DependencyGraph",
    "DependencyNode",
    "Document",
    "IREnum",
    "HTTP_METHODS",
    "PARAMETER_LOCATIONS",
    "MediaType",
    "Operation",
    "Parameter",
    "RequestBody",
    "Response",
    "ResponseHeader",
    "SecurityRequirement",
    "ComponentKind",
    "ComponentPointer",
    "component_ref",
    "parse_component_ref",
    "NOT_SET",
    "DependencyInfo",
    "Metadata",
    "PresenceChain",
    "Schema",
]
