"""Fully-qualified, metadata-style names for type symbols.

Names use dotted containment, ``Elem[]`` for arrays and ``Name<A, B>`` for
generic types, e.g. ``System.Collections.Generic.Dictionary<System.String,
System.Int32[]>``. Members and other non-type symbols are named after their
nearest enclosing type; namespaces have no qualified name.

Enclosing symbols are rendered with their display names. A symbol that
cannot be displayed ends the walk: the name built so far is returned and
flagged as incomplete instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from symbolwalk.settings import get_settings
from symbolwalk.symbols.exceptions import QualifiedNameError

logger = logging.getLogger(__name__)

GENERIC_ARITY_SEPARATOR = "`"


@dataclass(frozen=True)
class QualifiedName:
    """Outcome of building a qualified name."""

    text: str
    """The assembled name (possibly truncated)."""

    complete: bool = True
    """False when an enclosing symbol could not be displayed."""

    failed_symbol: Any = None
    """The symbol whose display name failed, if any."""

    error: Exception | None = None
    """The display failure, if any."""

    def __str__(self) -> str:
        return self.text


def qualified_name(symbol: Any | None, *, strict: bool | None = None) -> str:
    """Get the fully-qualified metadata-style name of a symbol.

    Args:
        symbol: Symbol to name; None yields an empty string
        strict: Raise instead of returning a truncated name
            (defaults to the ``strict_qualified_names`` setting)

    Returns:
        The qualified name, or "" for namespaces and symbols outside any type

    Raises:
        QualifiedNameError: In strict mode, when the name is incomplete
    """
    result = resolve_qualified_name(symbol)
    if strict is None:
        strict = get_settings().strict_qualified_names
    if strict and not result.complete:
        raise QualifiedNameError(
            f"Could not qualify past {result.failed_symbol!r}: {result.error}",
            partial_name=result.text,
        ) from result.error
    return result.text


def resolve_qualified_name(symbol: Any | None) -> QualifiedName:
    """Build the qualified name of a symbol, reporting truncation.

    Args:
        symbol: Symbol to name; None yields an empty name

    Returns:
        QualifiedName with the text and whether it is complete
    """
    if symbol is None or symbol.is_namespace:
        return QualifiedName("")

    type_symbol = symbol
    while type_symbol is not None and not type_symbol.is_type:
        type_symbol = type_symbol.containing_symbol
    if type_symbol is None:
        return QualifiedName("")

    head = _type_level_name(type_symbol)
    segments = [head.text]

    container = type_symbol.containing_symbol
    while container is not None and not _is_root_namespace(container):
        try:
            segments.append(container.original_definition.to_display_string())
        except Exception as e:
            partial = ".".join(reversed(segments))
            logger.warning(
                "Qualified name of %r truncated to %r: cannot display %r: %s",
                symbol,
                partial,
                container,
                e,
            )
            return QualifiedName(partial, complete=False, failed_symbol=container, error=e)
        container = container.containing_symbol

    return QualifiedName(
        ".".join(reversed(segments)),
        complete=head.complete,
        failed_symbol=head.failed_symbol,
        error=head.error,
    )


def _is_root_namespace(symbol: Any) -> bool:
    return symbol.is_namespace and symbol.is_global_namespace


def _is_generic(symbol: Any) -> bool:
    """Whether a named type gets an argument list.

    An integer ``arity`` decides on its own: a symbol with ``arity == 2`` is
    rendered as ``Name<A, B>`` even when its metadata name carries no
    backtick suffix, and one with ``arity == 0`` keeps its metadata name
    verbatim. Only models without an ``arity`` attribute fall back to looking
    for the backtick in the metadata name.
    """
    arity = getattr(symbol, "arity", None)
    if isinstance(arity, int):
        return arity > 0
    return len(symbol.metadata_name.split(GENERIC_ARITY_SEPARATOR)) >= 2


def _type_level_name(symbol: Any) -> QualifiedName:
    """Name of a type without its containers."""
    if symbol.is_array:
        element = resolve_qualified_name(symbol.element_type)
        return _with_text(element, element.text + "[]")

    name = symbol.metadata_name
    if not symbol.is_named_type or not _is_generic(symbol):
        return QualifiedName(name)

    base_name = name.split(GENERIC_ARITY_SEPARATOR)[0]
    arguments = [resolve_qualified_name(arg) for arg in symbol.type_arguments]
    text = f"{base_name}<{', '.join(arg.text for arg in arguments)}>"
    for argument in arguments:
        if not argument.complete:
            return _with_text(argument, text)
    return QualifiedName(text)


def _with_text(inner: QualifiedName, text: str) -> QualifiedName:
    return QualifiedName(
        text,
        complete=inner.complete,
        failed_symbol=inner.failed_symbol,
        error=inner.error,
    )
