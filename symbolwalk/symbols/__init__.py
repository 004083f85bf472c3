"""Symbol model and metadata-style qualified names.

This module provides:
- An in-memory symbol graph (namespaces, types, members)
- Fully-qualified metadata-style names for type symbols
- Declared-symbol collection from C# syntax trees
"""

from symbolwalk.symbols.declarations import (
    DeclarationTable,
    collect_declarations,
)
from symbolwalk.symbols.exceptions import (
    QualifiedNameError,
    SymbolDisplayError,
    SymbolError,
)
from symbolwalk.symbols.model import (
    ArrayTypeSymbol,
    LocalSymbol,
    MemberSymbol,
    NamedTypeSymbol,
    NamespaceSymbol,
    Symbol,
    SymbolKind,
    SymbolLike,
    TypeKind,
    TypeParameterSymbol,
    TypeSymbol,
)
from symbolwalk.symbols.naming import (
    QualifiedName,
    qualified_name,
    resolve_qualified_name,
)

__all__ = [
    # Exceptions
    "SymbolError",
    "SymbolDisplayError",
    "QualifiedNameError",
    # Model
    "Symbol",
    "SymbolKind",
    "SymbolLike",
    "TypeKind",
    "NamespaceSymbol",
    "TypeSymbol",
    "NamedTypeSymbol",
    "ArrayTypeSymbol",
    "TypeParameterSymbol",
    "MemberSymbol",
    "LocalSymbol",
    # Naming
    "QualifiedName",
    "qualified_name",
    "resolve_qualified_name",
    # Declarations
    "DeclarationTable",
    "collect_declarations",
]
