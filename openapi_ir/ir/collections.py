"""Immutable, order-preserving mappings used throughout the IR."""

from collections.abc import Mapping
from typing import Any, Iterable, Iterator, List, Tuple, Union


class OrderedMap(Mapping):
    """
    Read-only mapping that remembers insertion order and refuses duplicates.

    Two OrderedMaps are equal only when they hold the same pairs in the same
    order; order is meaningful in the IR (it drives generated output order).
    """

    __slots__ = ("_data",)

    def __init__(self, items: Union[Mapping, Iterable[Tuple[str, Any]], None] = None):
        data = {}
        if items is None:
            pairs = ()
        elif isinstance(items, Mapping):
            pairs = items.items()
        else:
            pairs = items
        for key, value in pairs:
            if key in data:
                raise ValueError(f"Duplicate key '{key}' in {type(self).__name__}")
            data[key] = value
        object.__setattr__(self, "_data", data)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self) -> Iterator:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other):
        if isinstance(other, OrderedMap):
            return list(self._data.items()) == list(other._data.items())
        if isinstance(other, Mapping):
            return dict(self._data) == dict(other)
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __reduce__(self):
        return type(self), (list(self._data.items()),)

    def __repr__(self) -> str:
        inner = ", ".join(f"{key!r}: {value!r}" for key, value in self._data.items())
        return f"{type(self).__name__}({{{inner}}})"

    def to_pairs(self) -> List[List[Any]]:
        """Explicit [key, value] pairs (the JSON form of an ordered map)."""
        return [[key, value] for key, value in self._data.items()]


class SchemaProperties(OrderedMap):
    """Property name -> child Schema, in declaration order."""

    __slots__ = ()
