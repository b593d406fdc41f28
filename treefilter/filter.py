"""
Tree node filter.

Selects nodes of a hierarchy by their slash-delimited path and, optionally, by
key/value properties attached to each node.

Example:
    from treefilter import TreeNodeFilter

    node_filter = TreeNodeFilter("/MyAssembly/MyNamespace/(ClassA|ClassB)/**")
    node_filter.matches("/MyAssembly/MyNamespace/ClassA/Test1")  # True

    # Property filters select by trait
    node_filter = TreeNodeFilter("/*/*/*/*[Category=fast]")
    node_filter.matches("/Asm/Ns/Class/Test1", {"Category": "fast"})  # True
"""

from __future__ import annotations

import logging

from .expressions import FilterExpression
from .matching import match_path
from .parser import parse
from .properties import PropertyBag, PropertyLike

logger = logging.getLogger(__name__)


class TreeNodeFilter:
    """
    A parsed, validated and immutable tree node filter.

    Construction raises FilterSyntaxError or FilterValidationError for malformed
    filters; there is no partially usable filter object.
    """

    __slots__ = ("_filter", "_segments")

    def __init__(self, filter: str):  # noqa: A002
        segments = parse(filter)
        self._filter = filter
        self._segments = segments
        logger.debug(f"Parsed filter {filter!r} into {len(segments)} segment(s)")

    @property
    def filter(self) -> str:
        """The filter string exactly as passed to the constructor."""
        return self._filter

    @property
    def segments(self) -> tuple[FilterExpression, ...]:
        """One expression per `/`-delimited segment of the filter."""
        return self._segments

    def matches(self, path: str, properties: PropertyLike | None = None) -> bool:
        """
        Check whether a node path (and its properties) is selected by this filter.

        Args:
            path: Node path starting with `/`, e.g. ``/Assembly/Namespace/Class/Test``.
            properties: The node's properties as a PropertyBag, an iterable of
                Property objects or a plain ``{key: value}`` mapping.

        Raises:
            InvalidNodePathError: If the path does not start with `/`.
        """
        if not isinstance(path, str):
            raise TypeError(f"path must be a str, got {type(path).__name__}")
        result = match_path(self._segments, path, PropertyBag.coerce(properties))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Filter {self._filter!r} {'matched' if result else 'rejected'} {path!r}")
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeNodeFilter):
            return NotImplemented
        return self._filter == other._filter

    def __hash__(self) -> int:
        return hash(self._filter)

    def __str__(self) -> str:
        return self._filter

    def __repr__(self) -> str:
        return f"TreeNodeFilter({self._filter!r})"


__all__ = ["TreeNodeFilter"]
