"""Per-build state threaded through every lowering call."""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

from ..resolver import ReferenceResolver


@dataclass(frozen=True)
class BuildContext:
    """
    document: the parsed OpenAPI input (never mutated)
    resolver: the build's ReferenceResolver
    path: location of the node being lowered, for error messages only
    required: whether the current position is required in its parent
    """
    document: Mapping[str, Any]
    resolver: ReferenceResolver
    path: Tuple[str, ...] = ()
    required: bool = False

    @classmethod
    def for_document(cls, document: Mapping[str, Any]) -> "BuildContext":
        return cls(document=document, resolver=ReferenceResolver(document))

    def child(self, *segments: Any, required: Optional[bool] = None) -> "BuildContext":
        return replace(
            self,
            path=self.path + tuple(str(segment) for segment in segments),
            required=self.required if required is None else required,
        )

    @property
    def openapi_version(self) -> str:
        return str(self.document.get("openapi", "3.0.0"))

    @property
    def is_openapi_31(self) -> bool:
        return self.openapi_version.startswith("3.1")
