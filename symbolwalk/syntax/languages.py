"""Tree-sitter language detection and layout classification.

This module maps file extensions to tree-sitter grammars and decides which
rendering layout the node printer uses for each grammar.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class TreeSitterLanguage(Enum):
    """Languages supported by Tree-sitter in this module."""

    PYTHON = "python"
    TYPESCRIPT = "typescript"
    TSX = "tsx"
    JAVASCRIPT = "javascript"
    RUST = "rust"
    GO = "go"
    JAVA = "java"
    C = "c"
    CPP = "cpp"
    CSHARP = "c_sharp"


# Map file extensions to tree-sitter language names
EXTENSION_TO_LANGUAGE: dict[str, TreeSitterLanguage] = {
    ".py": TreeSitterLanguage.PYTHON,
    ".pyi": TreeSitterLanguage.PYTHON,
    ".ts": TreeSitterLanguage.TYPESCRIPT,
    ".tsx": TreeSitterLanguage.TSX,
    ".js": TreeSitterLanguage.JAVASCRIPT,
    ".jsx": TreeSitterLanguage.JAVASCRIPT,
    ".mjs": TreeSitterLanguage.JAVASCRIPT,
    ".cjs": TreeSitterLanguage.JAVASCRIPT,
    ".rs": TreeSitterLanguage.RUST,
    ".go": TreeSitterLanguage.GO,
    ".java": TreeSitterLanguage.JAVA,
    ".c": TreeSitterLanguage.C,
    ".h": TreeSitterLanguage.C,
    ".cpp": TreeSitterLanguage.CPP,
    ".hpp": TreeSitterLanguage.CPP,
    ".cc": TreeSitterLanguage.CPP,
    ".cxx": TreeSitterLanguage.CPP,
    ".cs": TreeSitterLanguage.CSHARP,
}

# Grammars whose statements are terminated by ';' and grouped by braces, so
# their tokens can be re-laid out freely without changing meaning.
TOKEN_LAYOUT_LANGUAGES: frozenset[TreeSitterLanguage] = frozenset(
    {
        TreeSitterLanguage.CSHARP,
        TreeSitterLanguage.JAVA,
        TreeSitterLanguage.C,
        TreeSitterLanguage.CPP,
    }
)

# Root node type of each grammar. Some roots are shared between grammars
# ("program", "source_file"), in which case only the layout matters.
ROOT_NODE_TYPES: dict[str, TreeSitterLanguage] = {
    "compilation_unit": TreeSitterLanguage.CSHARP,
    "translation_unit": TreeSitterLanguage.CPP,
    "module": TreeSitterLanguage.PYTHON,
}


def detect_language(file_path: str | Path) -> TreeSitterLanguage | None:
    """Detect the programming language from a file path.

    Args:
        file_path: Path to a source file (can be a URI with query params)

    Returns:
        TreeSitterLanguage if recognized, None otherwise
    """
    # Strip query parameters from URIs (e.g., git://...?ref=main)
    path_str = str(file_path).split("?")[0]
    suffix = Path(path_str).suffix.lower()
    return EXTENSION_TO_LANGUAGE.get(suffix)


def language_for_root(root_type: str) -> TreeSitterLanguage | None:
    """Guess the grammar from the type of a tree's root node."""
    return ROOT_NODE_TYPES.get(root_type)


def uses_token_layout(language: TreeSitterLanguage | None) -> bool:
    """Whether the node printer may rebuild whitespace from tokens."""
    return language in TOKEN_LAYOUT_LANGUAGES
