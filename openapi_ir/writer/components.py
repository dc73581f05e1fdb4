"""IR components -> `components.*` maps and `x-ext` side-maps."""

import copy
from typing import Any, Callable, Dict, Iterable, Tuple

from ..errors import IRWriteError
from ..ir.components import Component, SchemaComponent, component_payload
from ..ir.pointers import ComponentKind
from .operations import write_header, write_parameter, write_request_body, write_response
from .schema import write_schema


def _verbatim(payload: Any, openapi_31: bool) -> Any:
    return copy.deepcopy(payload)


COMPONENT_WRITERS: Dict[ComponentKind, Callable[[Any, bool], Any]] = {
    ComponentKind.SCHEMA: write_schema,
    ComponentKind.PARAMETER: write_parameter,
    ComponentKind.REQUEST_BODY: write_request_body,
    ComponentKind.RESPONSE: write_response,
    ComponentKind.HEADER: write_header,
    ComponentKind.SECURITY_SCHEME: _verbatim,
    ComponentKind.LINK: _verbatim,
    ComponentKind.CALLBACK: _verbatim,
    ComponentKind.PATH_ITEM: _verbatim,
    ComponentKind.EXAMPLE: _verbatim,
}


def write_components(components: Iterable[Component], openapi_31: bool) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Regroup components by kind.

    Returns:
        (components map, x-ext side-map); either may be empty
    """
    grouped: Dict[str, Dict[str, Any]] = {}
    bundles: Dict[str, Any] = {}

    for component in components:
        writer = COMPONENT_WRITERS.get(component.kind)
        if writer is None:
            raise IRWriteError(f"No writer for component kind {component.kind!r}")
        written = writer(component_payload(component), openapi_31)

        if isinstance(component, SchemaComponent) and component.bundle_key is not None:
            target = (
                bundles.setdefault(component.bundle_key, {})
                .setdefault("components", {})
                .setdefault(ComponentKind.SCHEMA.value, {})
            )
        else:
            target = grouped.setdefault(component.kind.value, {})

        if component.name in target:
            raise IRWriteError(f"Duplicate {component.kind.value} component '{component.name}'")
        target[component.name] = written

    # Canonical kind order
    ordered = {kind.value: grouped[kind.value] for kind in ComponentKind if kind.value in grouped}
    return ordered, bundles
