"""
Reference resolution over a parsed OpenAPI document.

The resolver looks pointers up in `components.<kind>` and in the `x-ext`
side-maps that a multi-file bundler leaves behind:

    doc["x-ext"][<hash>]["components"][<kind>][<name>]

Validation runs in a fixed order so the first problem found is the one
reported: malformed pointer, wrong kind, missing target, alias loop.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .errors import (
    CircularReferenceResolution,
    NestedReferenceNotAllowed,
    UnresolvedReference,
    WrongReferenceKind,
)
from .ir.pointers import BUNDLE_KEY, ComponentKind, ComponentPointer, parse_component_ref
from .ir_logging import get_logger

logger = get_logger(__name__)


def is_reference(node: Any) -> bool:
    return isinstance(node, Mapping) and "$ref" in node


class ReferenceResolver:
    """
    Resolves `$ref` pointers against one document.

    One instance belongs to one build; the cache never outlives it.
    """

    def __init__(self, document: Mapping):
        self.document = document
        self._cache: Dict[Tuple[str, ComponentKind, bool], Any] = {}

    # ---------- lookup ----------

    def bundle_keys(self) -> List[str]:
        side_maps = self.document.get(BUNDLE_KEY)
        if not isinstance(side_maps, Mapping):
            return []
        return [key for key, entry in side_maps.items() if isinstance(entry, Mapping)]

    def bundled_components(self, bundle_key: str, kind: ComponentKind) -> Mapping:
        entry = (self.document.get(BUNDLE_KEY) or {}).get(bundle_key) or {}
        return (entry.get("components") or {}).get(kind.value) or {}

    def standard_components(self, kind: ComponentKind) -> Mapping:
        return (self.document.get("components") or {}).get(kind.value) or {}

    def _candidate_maps(self, pointer: ComponentPointer, kind: ComponentKind) -> Iterator[Mapping]:
        if pointer.bundle_key is not None:
            yield self.bundled_components(pointer.bundle_key, kind)
            yield self.standard_components(kind)
            return
        yield self.standard_components(kind)
        for bundle_key in self.bundle_keys():
            yield self.bundled_components(bundle_key, kind)

    def lookup(self, pointer: ComponentPointer, kind: ComponentKind) -> Optional[Any]:
        """Raw target of a pointer, or None when no location holds it."""
        for components in self._candidate_maps(pointer, kind):
            if pointer.name in components:
                return components[pointer.name]
        return None

    # ---------- resolution ----------

    def parse(self, ref: str, expected_kind: ComponentKind, path: Sequence[str] = ()) -> ComponentPointer:
        """Parse `ref` and check that it points into `expected_kind`."""
        pointer = parse_component_ref(ref, path)
        if pointer.kind != expected_kind.value:
            raise WrongReferenceKind(
                f"$ref '{ref}' points to {pointer.kind}, expected {expected_kind.value}",
                path, ref, expected=expected_kind.value, actual=pointer.kind,
            )
        return pointer

    def _lookup_or_raise(self, pointer: ComponentPointer, kind: ComponentKind, path: Sequence[str]) -> Any:
        target = self.lookup(pointer, kind)
        if target is None:
            if pointer.is_bundled:
                where = f"{BUNDLE_KEY}.{pointer.bundle_key}.components.{kind.value} or components.{kind.value}"
            else:
                where = f"components.{kind.value} or any {BUNDLE_KEY} side-map"
            raise UnresolvedReference(
                f"$ref '{pointer.ref}' has no target: '{pointer.name}' not found in {where}",
                path, pointer.ref,
            )
        return target

    def resolve(self, ref: str, expected_kind: ComponentKind, path: Sequence[str] = (),
                allow_nested: bool = True) -> Any:
        """
        Resolve `ref` to the raw component it names.

        Aliases (a component that is itself a `$ref`) are followed until a
        concrete target is found. With `allow_nested=False` the first alias
        is an error instead.

        Raises:
            InvalidReference, WrongReferenceKind, UnresolvedReference,
            CircularReferenceResolution, NestedReferenceNotAllowed
        """
        expected_kind = ComponentKind(expected_kind)
        key = (ref, expected_kind, allow_nested)
        if key in self._cache:
            return self._cache[key]

        pointer = self.parse(ref, expected_kind, path)
        seen = {pointer.ref}
        chain = [pointer.ref]
        target = self._lookup_or_raise(pointer, expected_kind, path)

        while is_reference(target):
            next_ref = target["$ref"]
            if not allow_nested:
                raise NestedReferenceNotAllowed(
                    f"$ref '{ref}' resolves to another $ref '{next_ref}'; "
                    f"only single-hop references are supported here",
                    path, ref,
                )
            next_pointer = self.parse(next_ref, expected_kind, path)
            chain.append(next_pointer.ref)
            if next_pointer.ref in seen:
                raise CircularReferenceResolution(
                    f"Circular $ref chain: {' -> '.join(chain)}",
                    path, ref, chain=chain,
                )
            seen.add(next_pointer.ref)
            target = self._lookup_or_raise(next_pointer, expected_kind, path)

        if len(chain) > 1:
            logger.debug(f"[REF] {' -> '.join(chain)}")
        self._cache[key] = target
        return target

    def check(self, ref: str, expected_kind: ComponentKind, path: Sequence[str] = ()) -> ComponentPointer:
        """Validate `ref` fully and return its pointer, without using the target."""
        pointer = self.parse(ref, expected_kind, path)
        self.resolve(ref, expected_kind, path)
        return pointer
