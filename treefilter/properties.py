"""
Node properties.

Discovered nodes carry a bag of properties. Only key/value pairs take part in
`Node[key=value]` filtering; every other property kind is carried along but
ignored by the matcher.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Union


class Property:
    """Base class for all property kinds attached to a node."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class KeyValuePairProperty(Property):
    """A string key/value pair, e.g. a test trait such as `Category=fast`."""

    key: str
    value: str


class PropertyBag:
    """Immutable, ordered collection of node properties."""

    __slots__ = ("_properties",)

    def __init__(self, properties: Iterable[Property] = ()) -> None:
        items = tuple(properties)
        for prop in items:
            if not isinstance(prop, Property):
                raise TypeError(f"Expected a Property, got {type(prop).__name__}")
        self._properties: tuple[Property, ...] = items

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> PropertyBag:
        """Build a bag of key/value pairs from a plain mapping."""
        return cls(KeyValuePairProperty(str(k), str(v)) for k, v in mapping.items())

    @classmethod
    def coerce(cls, properties: PropertyLike | None) -> PropertyBag:
        """Accept a bag, a mapping, any iterable of properties or None."""
        if properties is None:
            return _EMPTY_BAG
        if isinstance(properties, PropertyBag):
            return properties
        if isinstance(properties, Mapping):
            return cls.from_mapping(properties)
        return cls(properties)

    def key_value_pairs(self) -> Iterator[KeyValuePairProperty]:
        """Yield only the key/value entries of the bag."""
        for prop in self._properties:
            if isinstance(prop, KeyValuePairProperty):
                yield prop

    def __iter__(self) -> Iterator[Property]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __bool__(self) -> bool:
        return bool(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyBag):
            return NotImplemented
        return self._properties == other._properties

    def __hash__(self) -> int:
        return hash(self._properties)

    def __repr__(self) -> str:
        return f"PropertyBag({list(self._properties)!r})"


PropertyLike = Union[PropertyBag, Mapping[str, str], Iterable[Property]]

_EMPTY_BAG = PropertyBag()


__all__ = ["KeyValuePairProperty", "Property", "PropertyBag", "PropertyLike"]
