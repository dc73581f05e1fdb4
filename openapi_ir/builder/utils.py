"""Small helpers shared by the lowering modules."""

import copy
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from ..ir.pointers import BUNDLE_PREFIX
from ..ir.schema import NOT_SET

EXTENSION_PREFIX = "x-"


def opaque(value: Any) -> Any:
    """Deep copy of a JSON payload the IR carries without interpreting it."""
    return copy.deepcopy(value)


def opaque_or_none(node: Mapping, key: str) -> Any:
    if key not in node:
        return None
    return opaque(node[key])


def opaque_or_not_set(node: Mapping, key: str) -> Any:
    """Like opaque_or_none, but keeps an explicit null apart from absence."""
    if key not in node:
        return NOT_SET
    return opaque(node[key])


def extract_extensions(node: Mapping) -> Optional[Dict[str, Any]]:
    """Collect the `x-*` keys of an object, or None when there are none."""
    extensions = {
        key: opaque(value)
        for key, value in node.items()
        if isinstance(key, str) and key.startswith(EXTENSION_PREFIX)
    }
    return extensions or None


def unique_tuple(values) -> Tuple[Any, ...]:
    """Order-preserving de-duplication."""
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return tuple(seen)


def tuple_or_none(values) -> Optional[Tuple[Any, ...]]:
    if values is None:
        return None
    return tuple(opaque(value) for value in values)


def kept_ref(ref: str) -> Optional[str]:
    """
    The `$ref` a lowered parameter/body/response/header remembers.

    Bundled pointers are dropped: only bundled schemas are carried as
    components, so anything else from a side-map is written back inline.
    """
    if ref.startswith(BUNDLE_PREFIX):
        return None
    return ref
