"""
openapi_ir - an intermediate representation for OpenAPI 3.0 / 3.1 documents.

    from openapi_ir import build_document, write_document

    ir = build_document(openapi_dict)
    assert build_document(write_document(ir)) == ir
"""

from .builder import build_document
from .complexity import DEFAULT_COMPLEXITY_THRESHOLD, score
from .config import IRSettings
from .errors import (
    CircularReferenceResolution,
    InvalidParameter,
    InvalidReference,
    IRBuildError,
    IRWriteError,
    NestedReferenceNotAllowed,
    UnresolvedReference,
    WrongReferenceKind,
)
from .ir import Document, Schema
from .loader import dump_document, load_openapi_document
from .resolver import ReferenceResolver
from .writer import write_document

__version__ = "0.1.0"

__all__ = [
    "build_document",
    "write_document",
    "score",
    "DEFAULT_COMPLEXITY_THRESHOLD",
    "IRSettings",
    "ReferenceResolver",
    "Document",
    "Schema",
    "load_openapi_document",
    "dump_document",
    "IRBuildError",
    "IRWriteError",
    "InvalidReference",
    "WrongReferenceKind",
    "UnresolvedReference",
    "CircularReferenceResolution",
    "NestedReferenceNotAllowed",
    "InvalidParameter",
]
