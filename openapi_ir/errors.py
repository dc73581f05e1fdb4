"""
Error taxonomy for IR construction.

Every build error carries the pointer involved (when there is one) and the
location path of the node being lowered. Errors are never recovered inside
the core: they abort the whole build.
"""

from typing import Optional, Sequence


def format_location(path: Sequence[str]) -> str:
    """Render a build path as a slash separated location."""
    if not path:
        return "<root>"
    return "/".join(str(part) for part in path)


class IRBuildError(Exception):
    """Base class for every fatal IR build failure."""

    def __init__(self, message: str, path: Sequence[str] = (), ref: Optional[str] = None):
        self.path = tuple(path)
        self.ref = ref
        self.location = format_location(self.path)
        super().__init__(f"{message} (at {self.location})")


class InvalidReference(IRBuildError):
    """The $ref string is not a well-formed component pointer."""


class WrongReferenceKind(IRBuildError):
    """The $ref points into a component kind that the call site cannot accept."""

    def __init__(self, message: str, path: Sequence[str] = (), ref: Optional[str] = None,
                 expected: Optional[str] = None, actual: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message, path, ref)


class UnresolvedReference(IRBuildError):
    """The $ref is well formed but has no target in the document."""


class CircularReferenceResolution(IRBuildError):
    """Following a chain of $ref aliases came back to a pointer already on the chain."""

    def __init__(self, message: str, path: Sequence[str] = (), ref: Optional[str] = None,
                 chain: Sequence[str] = ()):
        self.chain = tuple(chain)
        super().__init__(message, path, ref)


class NestedReferenceNotAllowed(IRBuildError):
    """A single-hop reference resolved to yet another reference."""


class InvalidParameter(IRBuildError):
    """A parameter object has neither `schema` nor `content`."""


class IRWriteError(RuntimeError):
    """The writer met an IR that violates a construction invariant."""
