"""IR -> OpenAPI writer."""

from .components import write_components
from .document import write_document
from .operations import (
    write_header,
    write_operation,
    write_parameter,
    write_paths,
    write_request_body,
    write_response,
)
from .schema import write_schema

__all__ = [
    "write_components",
    "write_document",
    "write_header",
    "write_operation",
    "write_parameter",
    "write_paths",
    "write_request_body",
    "write_response",
    "write_schema",
]
