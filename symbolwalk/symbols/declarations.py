"""Declared-symbol collection from tree-sitter C# trees.

This module walks a C# syntax tree and records the entities it declares:
- namespaces (block and file-scoped, dotted names split into nesting levels)
- types with their type parameters (partial declarations share one symbol)
- members: methods, constructors, properties, fields, events, enum members

References are never resolved: a field of type ``List<int>`` is recorded as a
field, the ``List<int>`` it mentions is not bound to anything.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from symbolwalk.symbols.model import (
    MemberSymbol,
    NamedTypeSymbol,
    NamespaceSymbol,
    Symbol,
    SymbolKind,
    TypeKind,
)
from symbolwalk.symbols.naming import qualified_name
from symbolwalk.syntax.navigation import find_descendants, find_nearest_ancestor

logger = logging.getLogger(__name__)

NAMESPACE_NODE_TYPES: frozenset[str] = frozenset(
    {"namespace_declaration", "file_scoped_namespace_declaration"}
)

TYPE_NODE_KINDS: dict[str, TypeKind] = {
    "class_declaration": TypeKind.CLASS,
    "struct_declaration": TypeKind.STRUCT,
    "interface_declaration": TypeKind.INTERFACE,
    "enum_declaration": TypeKind.ENUM,
    "record_declaration": TypeKind.RECORD,
    "record_struct_declaration": TypeKind.RECORD,
    "delegate_declaration": TypeKind.DELEGATE,
}

MEMBER_NODE_KINDS: dict[str, SymbolKind] = {
    "method_declaration": SymbolKind.METHOD,
    "constructor_declaration": SymbolKind.CONSTRUCTOR,
    "property_declaration": SymbolKind.PROPERTY,
    "event_declaration": SymbolKind.EVENT,
    "enum_member_declaration": SymbolKind.FIELD,
}

# Declarations that introduce one symbol per variable declarator
VARIABLE_MEMBER_KINDS: dict[str, SymbolKind] = {
    "field_declaration": SymbolKind.FIELD,
    "event_field_declaration": SymbolKind.EVENT,
}

DECLARATION_NODE_TYPES: frozenset[str] = frozenset().union(
    NAMESPACE_NODE_TYPES,
    TYPE_NODE_KINDS,
    MEMBER_NODE_KINDS,
    {"variable_declarator", "type_parameter"},
)


@dataclass
class DeclarationTable:
    """Symbols declared by one syntax tree, indexed by declaring node."""

    global_namespace: NamespaceSymbol = field(default_factory=NamespaceSymbol.create_global)
    _by_node: dict[Any, Symbol] = field(default_factory=dict, repr=False)

    def declared_symbol(self, node: Any) -> Symbol | None:
        """Get the symbol declared by a node, if it declares one."""
        return self._by_node.get(node)

    def enclosing_symbol(self, node: Any) -> Symbol | None:
        """Get the symbol of the nearest declaration containing a node.

        Args:
            node: Any node of the tree (a declaration counts as its own container)

        Returns:
            Declared symbol, None if the node is outside every declaration
        """
        declaration = find_nearest_ancestor(node, DECLARATION_NODE_TYPES)
        while declaration is not None:
            symbol = self._by_node.get(declaration)
            if symbol is not None:
                return symbol
            declaration = find_nearest_ancestor(declaration.parent, DECLARATION_NODE_TYPES)
        return None

    def named_types(self) -> Iterator[NamedTypeSymbol]:
        """Iterate over all declared types, outer types before nested ones."""
        stack: list[Symbol] = [self.global_namespace]
        while stack:
            symbol = stack.pop()
            if isinstance(symbol, NamedTypeSymbol):
                yield symbol
            members = getattr(symbol, "members", None)
            if members:
                stack.extend(reversed(list(members.values())))

    def find_type(self, name: str) -> NamedTypeSymbol | None:
        """Find a declared type by its qualified name, e.g. ``N.Outer<T>.Inner``."""
        for symbol in self.named_types():
            if qualified_name(symbol) == name:
                return symbol
        return None

    def register(self, node: Any, symbol: Symbol) -> None:
        self._by_node[node] = symbol

    def __len__(self) -> int:
        return len(self._by_node)


def collect_declarations(root: Any) -> DeclarationTable:
    """Collect the symbols declared in a C# syntax tree.

    Args:
        root: Root node (``compilation_unit``) or any subtree

    Returns:
        DeclarationTable for the tree
    """
    table = DeclarationTable()
    _Collector(table).visit_children(root, table.global_namespace)
    logger.debug(
        "Collected %d declaration(s) from %s",
        len(table),
        root.type,
    )
    return table


def _text(node: Any) -> str:
    text = node.text
    return text.decode("utf-8", errors="replace") if text is not None else ""


def _declared_name(node: Any) -> str | None:
    name = node.child_by_field_name("name")
    if name is None:
        for child in node.named_children:
            if child.type == "identifier":
                name = child
                break
    if name is None:
        return None
    return _text(name).strip()


def _type_parameter_nodes(node: Any) -> list[Any]:
    for child in node.named_children:
        if child.type == "type_parameter_list":
            return [p for p in child.named_children if p.type == "type_parameter"]
    return []


class _Collector:
    def __init__(self, table: DeclarationTable):
        self._table = table

    def visit_children(self, node: Any, container: Symbol) -> None:
        scope = container
        for child in node.named_children:
            if child.type == "file_scoped_namespace_declaration":
                # Declarations after `namespace N;` belong to N whether the
                # grammar nests them under the directive or leaves them as siblings
                scope = self._enter_namespace(child, container)
                self.visit_children(child, scope)
                continue
            self.visit(child, scope)

    def visit(self, node: Any, container: Symbol) -> None:
        node_type = node.type
        if node_type == "namespace_declaration":
            self.visit_children(node, self._enter_namespace(node, container))
        elif node_type in TYPE_NODE_KINDS:
            symbol = self._declare_type(node, container)
            if symbol is not None:
                self.visit_children(node, symbol)
        elif node_type in MEMBER_NODE_KINDS:
            self._declare_member(node, container, MEMBER_NODE_KINDS[node_type])
        elif node_type in VARIABLE_MEMBER_KINDS:
            for declarator in find_descendants(node, "variable_declarator"):
                self._declare_member(declarator, container, VARIABLE_MEMBER_KINDS[node_type])
        else:
            self.visit_children(node, container)

    def _enter_namespace(self, node: Any, container: Symbol) -> Symbol:
        name_node = node.child_by_field_name("name")
        if not isinstance(container, NamespaceSymbol) or name_node is None:
            logger.debug("Skipping namespace declaration at %s", node.start_point)
            return container

        namespace = container
        for part in _text(name_node).split("."):
            part = part.strip()
            if part:
                namespace = namespace.get_or_add_namespace(part)
        self._table.register(node, namespace)
        return namespace

    def _declare_type(self, node: Any, container: Symbol) -> NamedTypeSymbol | None:
        name = _declared_name(node)
        if not name or not isinstance(container, (NamespaceSymbol, NamedTypeSymbol)):
            return None

        parameter_nodes = _type_parameter_nodes(node)
        candidate = NamedTypeSymbol(name=name, type_kind=TYPE_NODE_KINDS[node.type])
        for parameter in parameter_nodes:
            candidate.add_type_parameter(_declared_name(parameter) or _text(parameter))

        # Partial declarations resolve to the symbol created first
        symbol = container.add_member(candidate)
        if not isinstance(symbol, NamedTypeSymbol):
            logger.debug("Type %s clashes with %r in %r", name, symbol, container)
            return None
        self._table.register(node, symbol)
        for parameter_node, parameter in zip(parameter_nodes, symbol.type_parameters):
            self._table.register(parameter_node, parameter)
        return symbol

    def _declare_member(self, node: Any, container: Symbol, kind: SymbolKind) -> None:
        if not isinstance(container, NamedTypeSymbol):
            return
        name = _declared_name(node)
        if not name:
            return

        member = MemberSymbol(name=name, kind=kind)
        parameter_nodes = _type_parameter_nodes(node)
        for parameter in parameter_nodes:
            member.add_type_parameter(_declared_name(parameter) or _text(parameter))

        # Overloads share one symbol
        symbol = container.add_member(member)
        if not isinstance(symbol, MemberSymbol):
            logger.debug("Member %s clashes with %r in %r", name, symbol, container)
            return
        self._table.register(node, symbol)
        if symbol is member:
            for parameter_node, parameter in zip(parameter_nodes, member.type_parameters):
                self._table.register(parameter_node, parameter)
