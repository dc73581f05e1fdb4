"""IR operations, parameters, bodies and responses -> OpenAPI objects."""

import copy
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from ..ir.operations import (
    MediaType,
    Operation,
    Parameter,
    RequestBody,
    Response,
    ResponseHeader,
    SecurityRequirement,
)
from ..ir.schema import NOT_SET
from ..ir_logging import get_logger
from .schema import write_schema

logger = get_logger(__name__)


def _put(out: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


def _put_opaque(out: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None and value is not NOT_SET:
        out[key] = copy.deepcopy(value)


def _put_extensions(out: Dict[str, Any], extensions: Optional[Mapping]) -> None:
    if extensions:
        out.update(copy.deepcopy(dict(extensions)))


def write_media_type(media: MediaType, openapi_31: bool) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if media.schema is not None:
        out["schema"] = write_schema(media.schema, openapi_31)
    _put_opaque(out, "example", media.example)
    _put_opaque(out, "examples", media.examples)
    _put_opaque(out, "encoding", media.encoding)
    _put_extensions(out, media.extensions)
    return out


def write_content(content: Optional[Mapping], openapi_31: bool) -> Optional[Dict[str, Any]]:
    if content is None:
        return None
    return {
        media_type: write_media_type(media, openapi_31)
        for media_type, media in content.items()
    }


def write_parameter(parameter: Parameter, openapi_31: bool) -> Dict[str, Any]:
    if parameter.ref is not None:
        return {"$ref": parameter.ref}

    out: Dict[str, Any] = {"name": parameter.name, "in": parameter.location}
    _put(out, "description", parameter.description)
    # Path parameters default to required, so an explicit false must survive
    if parameter.required or parameter.location == "path":
        out["required"] = parameter.required
    _put(out, "deprecated", parameter.deprecated)
    _put(out, "allowEmptyValue", parameter.allow_empty_value)
    _put(out, "style", parameter.style)
    _put(out, "explode", parameter.explode)
    _put(out, "allowReserved", parameter.allow_reserved)

    if parameter.content_type is not None:
        out["content"] = {parameter.content_type: {"schema": write_schema(parameter.schema, openapi_31)}}
    else:
        out["schema"] = write_schema(parameter.schema, openapi_31)

    _put_opaque(out, "example", parameter.example)
    _put_opaque(out, "examples", parameter.examples)
    _put_extensions(out, parameter.extensions)
    return out


def write_request_body(request_body: RequestBody, openapi_31: bool) -> Dict[str, Any]:
    if request_body.ref is not None:
        return {"$ref": request_body.ref}

    out: Dict[str, Any] = {}
    _put(out, "description", request_body.description)
    out["content"] = write_content(request_body.content, openapi_31)
    if request_body.required:
        out["required"] = True
    _put_extensions(out, request_body.extensions)
    return out


def write_header(header: ResponseHeader, openapi_31: bool) -> Dict[str, Any]:
    if header.ref is not None:
        return {"$ref": header.ref}

    out: Dict[str, Any] = {}
    _put(out, "description", header.description)
    _put(out, "required", header.required)
    _put(out, "deprecated", header.deprecated)
    _put(out, "style", header.style)
    _put(out, "explode", header.explode)
    if header.schema is not None:
        if header.content_type is not None:
            out["content"] = {header.content_type: {"schema": write_schema(header.schema, openapi_31)}}
        else:
            out["schema"] = write_schema(header.schema, openapi_31)
    _put_opaque(out, "example", header.example)
    _put_opaque(out, "examples", header.examples)
    _put_extensions(out, header.extensions)
    return out


def write_response(response: Response, openapi_31: bool) -> Dict[str, Any]:
    if response.ref is not None:
        return {"$ref": response.ref}

    out: Dict[str, Any] = {}
    _put(out, "description", response.description)
    if response.headers is not None:
        out["headers"] = {
            name: write_header(header, openapi_31)
            for name, header in response.headers.items()
        }
    _put(out, "content", write_content(response.content, openapi_31))
    _put_opaque(out, "links", response.links)
    _put_extensions(out, response.extensions)
    return out


def write_security(requirements: Optional[Iterable[SecurityRequirement]]) -> Optional[List[Dict[str, List[str]]]]:
    if requirements is None:
        return None
    return [
        {scheme: list(scopes) for scheme, scopes in requirement.schemes.items()}
        for requirement in requirements
    ]


def write_operation(operation: Operation, openapi_31: bool) -> Dict[str, Any]:
    """
    One Operation Object. Inherited path-level `$ref` parameters are left to
    the path item; a redeclared one stays on the operation.
    """
    out: Dict[str, Any] = {}
    if operation.tags is not None:
        out["tags"] = list(operation.tags)
    _put(out, "summary", operation.summary)
    _put(out, "description", operation.description)
    _put_opaque(out, "externalDocs", operation.external_docs)
    _put(out, "operationId", operation.operation_id)

    parameters = [
        write_parameter(parameter, openapi_31)
        for parameter in operation.parameters
        if not parameter.inherited
    ]
    if parameters:
        out["parameters"] = parameters

    if operation.request_body is not None:
        out["requestBody"] = write_request_body(operation.request_body, openapi_31)
    out["responses"] = {
        response.status_code: write_response(response, openapi_31)
        for response in operation.responses
    }
    _put_opaque(out, "callbacks", operation.callbacks)
    _put(out, "deprecated", operation.deprecated)
    _put(out, "security", write_security(operation.security))
    if operation.servers is not None:
        out["servers"] = copy.deepcopy(list(operation.servers))
    _put_extensions(out, operation.extensions)
    return out


def write_paths(operations: Iterable[Operation], openapi_31: bool) -> Dict[str, Any]:
    """
    Regroup operations into `paths[path][method]`, paths in first-appearance
    order. Path-level fields are taken from the first operation of a path.
    """
    paths: Dict[str, Dict[str, Any]] = {}
    for operation in operations:
        path_item = paths.get(operation.path)
        if path_item is None:
            path_item = paths[operation.path] = {}
            _put(path_item, "summary", operation.path_item_summary)
            _put(path_item, "description", operation.path_item_description)
            if operation.path_item_servers is not None:
                path_item["servers"] = copy.deepcopy(list(operation.path_item_servers))
            if operation.path_item_parameter_refs:
                path_item["parameters"] = [{"$ref": ref} for ref in operation.path_item_parameter_refs]
        path_item[operation.method] = write_operation(operation, openapi_31)
        logger.debug(f"[WRITE] {operation.key}")
    return paths
