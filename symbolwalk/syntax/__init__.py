"""Syntax tree helpers over tree-sitter.

This module provides:
- Language detection and parser management
- Descendant and ancestor lookup by node kind
- Rendering nodes back to normalized source text
"""

from symbolwalk.syntax.exceptions import (
    SyntaxToolsError,
    TreeSitterNotAvailableError,
    UnsupportedLanguageError,
)
from symbolwalk.syntax.languages import (
    EXTENSION_TO_LANGUAGE,
    TreeSitterLanguage,
    detect_language,
    language_for_root,
    uses_token_layout,
)
from symbolwalk.syntax.manager import (
    TreeSitterManager,
    get_treesitter_manager,
    parse_source,
)
from symbolwalk.syntax.navigation import (
    SyntaxNodeLike,
    child_nodes,
    find_descendants,
    find_first_descendant,
    find_nearest_ancestor,
    iter_descendants,
    matches_kind,
)
from symbolwalk.syntax.printer import render_node

__all__ = [
    # Exceptions
    "SyntaxToolsError",
    "TreeSitterNotAvailableError",
    "UnsupportedLanguageError",
    # Languages
    "TreeSitterLanguage",
    "EXTENSION_TO_LANGUAGE",
    "detect_language",
    "language_for_root",
    "uses_token_layout",
    # Manager
    "TreeSitterManager",
    "get_treesitter_manager",
    "parse_source",
    # Navigation
    "SyntaxNodeLike",
    "child_nodes",
    "matches_kind",
    "iter_descendants",
    "find_descendants",
    "find_first_descendant",
    "find_nearest_ancestor",
    # Printer
    "render_node",
]
