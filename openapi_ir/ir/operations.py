"""IR types for operations and their parameters, bodies and responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .collections import OrderedMap
from .schema import NOT_SET, Metadata, Schema

# Path Item field order from the OpenAPI specification
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
PARAMETER_LOCATIONS = ("path", "query", "header", "cookie")
DEFAULT_STATUS = "default"


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool
    schema: Schema
    description: Optional[str] = None
    deprecated: Optional[bool] = None
    example: Any = NOT_SET
    examples: Optional[Dict[str, Any]] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: Optional[bool] = None
    allow_empty_value: Optional[bool] = None
    # Set when the schema came from `content` instead of `schema`
    content_type: Optional[str] = None
    ref: Optional[str] = None
    extensions: Optional[Dict[str, Any]] = None
    # A path-level `$ref` parameter the operation did not redeclare
    inherited: bool = False

    @property
    def metadata(self) -> Metadata:
        return self.schema.metadata

    @property
    def key(self) -> Tuple[str, str]:
        """Identity of a parameter within an operation: (name, location)."""
        return self.name, self.location


@dataclass(frozen=True)
class MediaType:
    schema: Optional[Schema] = None
    example: Any = NOT_SET
    examples: Optional[Dict[str, Any]] = None
    encoding: Optional[Dict[str, Any]] = None
    extensions: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class RequestBody:
    content: OrderedMap
    required: bool = False
    description: Optional[str] = None
    ref: Optional[str] = None
    extensions: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ResponseHeader:
    schema: Optional[Schema] = None
    description: Optional[str] = None
    required: Optional[bool] = None
    deprecated: Optional[bool] = None
    example: Any = NOT_SET
    examples: Optional[Dict[str, Any]] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    content_type: Optional[str] = None
    ref: Optional[str] = None
    extensions: Optional[Dict[str, Any]] = None


def group_by_location(parameters) -> OrderedMap:
    """location -> parameters, one entry per location in canonical order."""
    grouped = {location: [] for location in PARAMETER_LOCATIONS}
    for parameter in parameters:
        grouped.setdefault(parameter.location, []).append(parameter)
    return OrderedMap((location, tuple(items)) for location, items in grouped.items())


def _is_json_media_type(media_type: str) -> bool:
    return "json" in media_type


@dataclass(frozen=True)
class Response:
    status_code: str
    description: Optional[str] = None
    content: Optional[OrderedMap] = None
    headers: Optional[OrderedMap] = None
    links: Optional[Dict[str, Any]] = None
    ref: Optional[str] = None
    extensions: Optional[Dict[str, Any]] = None

    @property
    def schema(self) -> Optional[Schema]:
        """Schema of the first JSON media type, else of the first media type."""
        if not self.content:
            return None
        for media_type, media in self.content.items():
            if _is_json_media_type(media_type) and media.schema is not None:
                return media.schema
        for media in self.content.values():
            if media.schema is not None:
                return media.schema
        return None

    @property
    def is_success(self) -> bool:
        return self.status_code.startswith("2")


@dataclass(frozen=True)
class SecurityRequirement:
    """One security requirement object: scheme name -> scopes, all required together."""
    schemes: OrderedMap


@dataclass(frozen=True)
class Operation:
    method: str
    path: str
    parameters: Tuple[Parameter, ...] = ()
    parameters_by_location: OrderedMap = field(default_factory=OrderedMap)
    responses: Tuple[Response, ...] = ()
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    deprecated: Optional[bool] = None
    request_body: Optional[RequestBody] = None
    security: Optional[Tuple[SecurityRequirement, ...]] = None
    external_docs: Optional[Dict[str, Any]] = None
    callbacks: Optional[Dict[str, Any]] = None
    servers: Optional[Tuple[Dict[str, Any], ...]] = None
    extensions: Optional[Dict[str, Any]] = None
    path_item_summary: Optional[str] = None
    path_item_description: Optional[str] = None
    path_item_servers: Optional[Tuple[Dict[str, Any], ...]] = None
    path_item_parameter_refs: Tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return f"{self.method.upper()} {self.path}"

    def parameters_in(self, location: str) -> Tuple[Parameter, ...]:
        return self.parameters_by_location.get(location, ())

    def response(self, status_code: str) -> Optional[Response]:
        for response in self.responses:
            if response.status_code == str(status_code):
                return response
        return None

    @property
    def main_response(self) -> Optional[Response]:
        """
        The response a client should treat as the result.

        The first 2xx response wins. Without one, `default` is the main
        response; with one, `default` is an error fallback.
        """
        for response in self.responses:
            if response.is_success:
                return response
        return self.response(DEFAULT_STATUS)

    @property
    def error_responses(self) -> Tuple[Response, ...]:
        main = self.main_response
        return tuple(
            response for response in self.responses
            if response is not main and not response.is_success
        )
