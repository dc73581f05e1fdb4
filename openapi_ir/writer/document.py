"""IR Document -> OpenAPI document."""

import copy
from typing import Any, Dict

from ..ir.document import Document
from ..ir.pointers import BUNDLE_KEY
from ..ir_logging import get_logger
from .components import write_components
from .operations import write_paths, write_security

logger = get_logger(__name__)


def write_document(document: Document) -> Dict[str, Any]:
    """
    Write a fresh OpenAPI document from the IR.

    The Document is assumed well formed: every `$ref` written has a target
    because that target was itself a component the IR was built from.
    Nullability follows the document's OpenAPI version.

    Raises:
        IRWriteError: the IR breaks a construction invariant
    """
    openapi_31 = document.is_openapi_31
    out: Dict[str, Any] = {
        "openapi": document.openapi_version,
        "info": copy.deepcopy(document.info),
    }
    if document.json_schema_dialect is not None:
        out["jsonSchemaDialect"] = document.json_schema_dialect
    if document.servers:
        out["servers"] = copy.deepcopy(list(document.servers))

    out["paths"] = write_paths(document.operations, openapi_31)
    if document.webhooks is not None:
        out["webhooks"] = copy.deepcopy(document.webhooks)

    components, bundles = write_components(document.components, openapi_31)
    if components:
        out["components"] = components
    if document.security is not None:
        out["security"] = write_security(document.security)
    if document.tags is not None:
        out["tags"] = copy.deepcopy(list(document.tags))
    if document.external_docs is not None:
        out["externalDocs"] = copy.deepcopy(document.external_docs)
    if document.extensions:
        out.update(copy.deepcopy(document.extensions))
    if bundles:
        out[BUNDLE_KEY] = bundles

    logger.info(
        f"[WRITE] {len(out['paths'])} paths, "
        f"{sum(len(entries) for entries in components.values())} components"
    )
    return out
