"""
The recursive Schema node and its Metadata.

A Schema is either a reference (`ref` set, only `metadata` besides it) or an
inline definition. Cross-component links are always reference nodes, never
embedded copies, which is what lets cyclic schema graphs exist as finite
values.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from .collections import SchemaProperties


class _NotSet:
    """Marker for 'keyword absent' where None/null is a legal value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_SET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_NotSet, ())


NOT_SET = _NotSet()

PRIMITIVE_TYPES = ("string", "number", "integer", "boolean", "null")
COMPOSITION_KEYWORDS = ("all_of", "one_of", "any_of")


class PresenceChain(str, Enum):
    """Four-way classification of a schema position."""
    REQUIRED = "required"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    OPTIONAL_NULLABLE = "optional-nullable"

    @classmethod
    def derive(cls, required: bool, nullable: bool) -> "PresenceChain":
        if required:
            return cls.NULLABLE if nullable else cls.REQUIRED
        return cls.OPTIONAL_NULLABLE if nullable else cls.OPTIONAL


@dataclass(frozen=True)
class DependencyInfo:
    """Outgoing/incoming schema references of a component and its graph depth."""
    references: Tuple[str, ...] = ()
    referenced_by: Tuple[str, ...] = ()
    depth: int = 0


@dataclass(frozen=True)
class Metadata:
    required: bool = False
    nullable: bool = False
    default: Any = NOT_SET
    presence: PresenceChain = PresenceChain.OPTIONAL
    dependency_info: DependencyInfo = field(default_factory=DependencyInfo)
    circular_references: Tuple[str, ...] = ()

    @classmethod
    def for_position(cls, required: bool, nullable: bool = False, default: Any = NOT_SET) -> "Metadata":
        """Metadata for a node whose presence is decided by its position."""
        return cls(
            required=required,
            nullable=nullable,
            default=default,
            presence=PresenceChain.derive(required, nullable),
        )

    @property
    def has_default(self) -> bool:
        return self.default is not NOT_SET


SchemaType = Union[str, Tuple[str, ...], None]


@dataclass(frozen=True)
class Schema:
    metadata: Metadata = field(default_factory=Metadata)
    ref: Optional[str] = None

    type: SchemaType = None
    format: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    # Object
    properties: Optional[SchemaProperties] = None
    required: Tuple[str, ...] = ()
    additional_properties: Union[bool, "Schema", None] = None
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None

    # Array
    items: Union["Schema", Tuple["Schema", ...], None] = None
    additional_items: Optional["Schema"] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: Optional[bool] = None

    # String
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None

    # Number
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Union[bool, float, None] = None
    exclusive_maximum: Union[bool, float, None] = None
    multiple_of: Optional[float] = None

    enum: Optional[Tuple[Any, ...]] = None
    const: Any = NOT_SET

    # Composition
    all_of: Optional[Tuple["Schema", ...]] = None
    one_of: Optional[Tuple["Schema", ...]] = None
    any_of: Optional[Tuple["Schema", ...]] = None
    not_: Optional["Schema"] = None
    discriminator: Optional[Dict[str, Any]] = None

    # Annotations
    deprecated: Optional[bool] = None
    read_only: Optional[bool] = None
    write_only: Optional[bool] = None
    example: Any = NOT_SET
    examples: Any = None
    xml: Optional[Dict[str, Any]] = None
    external_docs: Optional[Dict[str, Any]] = None
    extensions: Optional[Dict[str, Any]] = None

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    @property
    def is_tuple(self) -> bool:
        return isinstance(self.items, tuple)

    @property
    def primitive_types(self) -> Tuple[str, ...]:
        """The declared type(s) as a tuple, empty for 'any'."""
        if self.type is None:
            return ()
        if isinstance(self.type, tuple):
            return self.type
        return (self.type,)

    def compositions(self) -> Iterator[Tuple[str, Tuple["Schema", ...]]]:
        """Yield (keyword, branches) for each composition list present."""
        for keyword in COMPOSITION_KEYWORDS:
            branches = getattr(self, keyword)
            if branches is not None:
                yield keyword, branches

    def children(self) -> Iterator[Tuple[str, "Schema"]]:
        """
        Yield (relative path, child) for every directly nested Schema.

        Reference nodes have no children: the referenced component is a
        separate arena entry.
        """
        if self.properties is not None:
            for name, child in self.properties.items():
                yield f"properties/{name}", child
        if isinstance(self.additional_properties, Schema):
            yield "additionalProperties", self.additional_properties
        if isinstance(self.items, tuple):
            for index, child in enumerate(self.items):
                yield f"prefixItems/{index}", child
        elif self.items is not None:
            yield "items", self.items
        if self.additional_items is not None:
            yield "items", self.additional_items
        for keyword, branches in self.compositions():
            camel = _CAMEL_COMPOSITION[keyword]
            for index, child in enumerate(branches):
                yield f"{camel}/{index}", child
        if self.not_ is not None:
            yield "not", self.not_

    def walk(self) -> Iterator["Schema"]:
        """Depth-first pre-order walk over this node and all nested nodes."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed([child for _, child in node.children()]))


_CAMEL_COMPOSITION = {"all_of": "allOf", "one_of": "oneOf", "any_of": "anyOf"}
