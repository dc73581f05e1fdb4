"""
Component pointers: parsing and formatting of `$ref` strings.

Two forms are understood:
- #/components/{kind}/{name}                   (standard location)
- #/x-ext/{hash}/components/{kind}/{name}      (bundled side-map)
"""

from enum import Enum
from typing import NamedTuple, Optional, Sequence
from urllib.parse import unquote

from ..errors import InvalidReference

COMPONENTS_PREFIX = "#/components/"
BUNDLE_PREFIX = "#/x-ext/"
BUNDLE_KEY = "x-ext"

EXPECTED_FORMATS = "#/components/{kind}/{name} or #/x-ext/{hash}/components/{kind}/{name}"


class ComponentKind(str, Enum):
    """Component kinds, valued by their key under `components`."""
    SCHEMA = "schemas"
    PARAMETER = "parameters"
    REQUEST_BODY = "requestBodies"
    RESPONSE = "responses"
    SECURITY_SCHEME = "securitySchemes"
    HEADER = "headers"
    LINK = "links"
    CALLBACK = "callbacks"
    PATH_ITEM = "pathItems"
    EXAMPLE = "examples"


class ComponentPointer(NamedTuple):
    kind: str
    name: str
    ref: str
    bundle_key: Optional[str] = None

    @property
    def is_bundled(self) -> bool:
        return self.bundle_key is not None


def _unescape(segment: str) -> str:
    # JSON pointer escaping, after URI percent-decoding
    return unquote(segment).replace("~1", "/").replace("~0", "~")


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def parse_component_ref(ref: str, path: Sequence[str] = ()) -> ComponentPointer:
    """
    Parse a `$ref` string into a ComponentPointer.

    Raises:
        InvalidReference: if the pointer is not one of the supported forms or
            has an empty kind/name segment.
    """
    if not isinstance(ref, str) or not ref:
        raise InvalidReference(f"Invalid $ref {ref!r}: expected {EXPECTED_FORMATS}", path, ref)

    if ref.startswith(COMPONENTS_PREFIX):
        rest = ref[len(COMPONENTS_PREFIX):]
        kind, sep, name = rest.partition("/")
        if kind and sep and name:
            return ComponentPointer(kind=kind, name=_unescape(name), ref=ref)

    elif ref.startswith(BUNDLE_PREFIX):
        parts = ref[len(BUNDLE_PREFIX):].split("/", 3)
        if len(parts) == 4 and parts[1] == "components" and all(parts):
            bundle_key, _, kind, name = parts
            return ComponentPointer(kind=kind, name=_unescape(name), ref=ref,
                                    bundle_key=_unescape(bundle_key))

    raise InvalidReference(f"Invalid $ref '{ref}': expected {EXPECTED_FORMATS}", path, ref)


def component_ref(kind: ComponentKind, name: str, bundle_key: Optional[str] = None) -> str:
    """Format the pointer for a component."""
    if bundle_key is not None:
        return f"{BUNDLE_PREFIX}{_escape(bundle_key)}/components/{kind.value}/{_escape(name)}"
    return f"{COMPONENTS_PREFIX}{kind.value}/{_escape(name)}"
