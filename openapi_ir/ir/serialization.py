"""
Document <-> plain JSON-compatible tree.

Ordered maps become explicit `[key, value]` pair lists so that order
survives any JSON encoder. Absent optional fields are omitted; for the
fields where null is a legal value (`example`, `const`, `default`) absence
means NOT_SET and an explicit null round-trips as null.
"""

from dataclasses import fields, is_dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Mapping

from .collections import OrderedMap, SchemaProperties
from .components import COMPONENT_TYPES, PAYLOAD_FIELDS, Component
from .document import DependencyGraph, DependencyNode, Document, IREnum
from .operations import (
    MediaType,
    Operation,
    Parameter,
    RequestBody,
    Response,
    ResponseHeader,
    SecurityRequirement,
    group_by_location,
)
from .pointers import ComponentKind
from .schema import NOT_SET, DependencyInfo, Metadata, PresenceChain, Schema

KIND_KEY = "kind"

# Derived views that are rebuilt on load instead of stored
_DERIVED_FIELDS = {(Operation, "parameters_by_location")}


# ---------- dump ----------

def to_json_value(value: Any) -> Any:
    if isinstance(value, OrderedMap):
        return [[key, to_json_value(item)] for key, item in value.items()]
    if is_dataclass(value) and not isinstance(value, type):
        return _dump_dataclass(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: to_json_value(item) for key, item in value.items()}
    return value


def _dump_dataclass(obj: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    kind = getattr(type(obj), "kind", None)
    if isinstance(kind, ComponentKind):
        out[KIND_KEY] = kind.value
    for field in fields(obj):
        if (type(obj), field.name) in _DERIVED_FIELDS:
            continue
        value = getattr(obj, field.name)
        if value is NOT_SET:
            continue
        if value is None and field.default is None:
            continue
        out[field.name] = to_json_value(value)
    return out


def document_to_dict(document: Document) -> Dict[str, Any]:
    return _dump_dataclass(document)


# ---------- load ----------

def _tuple(value) -> tuple:
    return tuple(value)


def _tuple_of(load: Callable) -> Callable:
    return lambda values: tuple(load(value) for value in values)


def _pairs(load: Callable, map_type=OrderedMap) -> Callable:
    return lambda pairs: map_type((key, load(value)) for key, value in pairs)


def _identity(value):
    return value


def _load(cls, data: Mapping[str, Any], converters: Mapping[str, Callable]) -> Any:
    kwargs = {}
    for key, value in data.items():
        if key == KIND_KEY:
            continue
        kwargs[key] = converters.get(key, _identity)(value)
    return cls(**kwargs)


def load_metadata(data: Mapping[str, Any]) -> Metadata:
    return _load(Metadata, data, {
        "presence": PresenceChain,
        "dependency_info": lambda info: _load(DependencyInfo, info, {
            "references": _tuple,
            "referenced_by": _tuple,
        }),
        "circular_references": _tuple,
    })


def _load_items(value):
    if isinstance(value, list):
        return tuple(load_schema(item) for item in value)
    return load_schema(value)


def _load_additional_properties(value):
    if isinstance(value, bool):
        return value
    return load_schema(value)


def _load_type(value):
    if isinstance(value, list):
        return tuple(value)
    return value


_SCHEMA_CONVERTERS: Dict[str, Callable] = {}


def load_schema(data: Mapping[str, Any]) -> Schema:
    return _load(Schema, data, _SCHEMA_CONVERTERS)


_SCHEMA_CONVERTERS.update({
    "metadata": load_metadata,
    "type": _load_type,
    "properties": _pairs(load_schema, SchemaProperties),
    "required": _tuple,
    "additional_properties": _load_additional_properties,
    "items": _load_items,
    "additional_items": load_schema,
    "enum": _tuple,
    "all_of": _tuple_of(load_schema),
    "one_of": _tuple_of(load_schema),
    "any_of": _tuple_of(load_schema),
    "not_": load_schema,
})


def load_parameter(data: Mapping[str, Any]) -> Parameter:
    return _load(Parameter, data, {"schema": load_schema})


def load_media_type(data: Mapping[str, Any]) -> MediaType:
    return _load(MediaType, data, {"schema": load_schema})


def load_request_body(data: Mapping[str, Any]) -> RequestBody:
    return _load(RequestBody, data, {"content": _pairs(load_media_type)})


def load_header(data: Mapping[str, Any]) -> ResponseHeader:
    return _load(ResponseHeader, data, {"schema": load_schema})


def load_response(data: Mapping[str, Any]) -> Response:
    return _load(Response, data, {
        "content": _pairs(load_media_type),
        "headers": _pairs(load_header),
    })


def load_security_requirement(data: Mapping[str, Any]) -> SecurityRequirement:
    return _load(SecurityRequirement, data, {"schemes": _pairs(_tuple)})


def load_operation(data: Mapping[str, Any]) -> Operation:
    operation = _load(Operation, data, {
        "parameters": _tuple_of(load_parameter),
        "responses": _tuple_of(load_response),
        "tags": _tuple,
        "request_body": load_request_body,
        "security": _tuple_of(load_security_requirement),
        "servers": _tuple,
        "path_item_servers": _tuple,
        "path_item_parameter_refs": _tuple,
    })
    return _with_grouping(operation)


def _with_grouping(operation: Operation) -> Operation:
    return replace(operation, parameters_by_location=group_by_location(operation.parameters))


_PAYLOAD_LOADERS: Dict[ComponentKind, Callable] = {
    ComponentKind.SCHEMA: load_schema,
    ComponentKind.PARAMETER: load_parameter,
    ComponentKind.REQUEST_BODY: load_request_body,
    ComponentKind.RESPONSE: load_response,
    ComponentKind.HEADER: load_header,
}


def load_component(data: Mapping[str, Any]) -> Component:
    kind = ComponentKind(data[KIND_KEY])
    payload_field = PAYLOAD_FIELDS[kind]
    loader = _PAYLOAD_LOADERS.get(kind, _identity)
    return _load(COMPONENT_TYPES[kind], data, {payload_field: loader})


def load_dependency_node(data: Mapping[str, Any]) -> DependencyNode:
    return _load(DependencyNode, data, {"dependencies": _tuple, "dependents": _tuple})


def load_dependency_graph(data: Mapping[str, Any]) -> DependencyGraph:
    return _load(DependencyGraph, data, {
        "nodes": _pairs(load_dependency_node),
        "topological_order": _tuple,
        "circular_references": _tuple_of(_tuple),
    })


def load_enum(data: Mapping[str, Any]) -> IREnum:
    return _load(IREnum, data, {"values": _tuple, "schema": load_schema})


def document_from_dict(data: Mapping[str, Any]) -> Document:
    """Inverse of document_to_dict."""
    return _load(Document, data, {
        "servers": _tuple,
        "components": _tuple_of(load_component),
        "operations": _tuple_of(load_operation),
        "dependency_graph": load_dependency_graph,
        "schema_names": _tuple,
        "enums": _pairs(load_enum),
        "security": _tuple_of(load_security_requirement),
        "tags": _tuple,
    })
