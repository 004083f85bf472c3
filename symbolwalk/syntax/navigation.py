"""Descendant and ancestor lookup over syntax trees.

The helpers work on any node object exposing ``type``, ``parent`` and
``children``. ``tree_sitter.Node`` qualifies as is; when a node also exposes
``named_children`` those are used, so punctuation and keyword tokens are never
treated as child nodes.

A ``kind`` is one of:
- a node type string, e.g. ``"class_declaration"``
- a collection of node type strings
- a Python class, matched with ``isinstance`` (for object-model trees)
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator, Sequence
from typing import Any, Protocol, TypeAlias, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class SyntaxNodeLike(Protocol):
    """Structural view of a syntax node."""

    @property
    def type(self) -> str: ...

    @property
    def children(self) -> Sequence[Any]: ...

    @property
    def parent(self) -> Any: ...


NodeKind: TypeAlias = str | Collection[str] | type


def matches_kind(node: Any, kind: NodeKind) -> bool:
    """Check whether a node is of the requested kind."""
    if isinstance(kind, type):
        return isinstance(node, kind)
    if isinstance(kind, str):
        return node.type == kind
    return node.type in kind


def child_nodes(node: Any) -> Sequence[Any]:
    """Return the child nodes of a node, skipping anonymous tokens."""
    named = getattr(node, "named_children", None)
    return node.children if named is None else named


def iter_descendants(
    node: Any,
    kind: NodeKind,
    exclude: Iterable[Any] = (),
) -> Iterator[Any]:
    """Yield the nodes of a kind found at or below ``node``.

    A node in ``exclude`` is skipped together with its whole subtree. A node
    that matches ``kind`` is yielded and not searched further, so nested
    nodes of the same kind below a match are never reported. Nodes come out
    in pre-order, left to right.

    Args:
        node: Node to start from (included in the search)
        kind: Node kind to look for
        exclude: Nodes acting as search boundaries
    """
    excluded = set(exclude)
    stack = [node]
    while stack:
        current = stack.pop()
        if current in excluded:
            continue
        if matches_kind(current, kind):
            yield current
            continue
        stack.extend(reversed(child_nodes(current)))


def find_descendants(
    node: Any,
    kind: NodeKind,
    exclude: Iterable[Any] = (),
) -> list[Any]:
    """Find the nodes of a kind at or below ``node``.

    See ``iter_descendants`` for the traversal rules.

    Returns:
        Matching nodes in pre-order
    """
    found = list(iter_descendants(node, kind, exclude))
    logger.debug("Found %d descendant(s) of kind %r", len(found), kind)
    return found


def find_first_descendant(
    node: Any,
    kind: NodeKind,
    exclude: Iterable[Any] = (),
) -> Any | None:
    """Return the first node ``find_descendants`` would return, or None."""
    return next(iter_descendants(node, kind, exclude), None)


def find_nearest_ancestor(node: Any | None, kind: NodeKind) -> Any | None:
    """Find the closest node of a kind walking up from ``node``.

    The start node itself is checked first.

    Args:
        node: Node to start from; None is allowed and yields None
        kind: Node kind to look for

    Returns:
        The nearest matching node, None if the root is passed without a match
    """
    current = node
    while current is not None:
        if matches_kind(current, kind):
            return current
        current = current.parent
    return None
