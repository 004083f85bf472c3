"""Syntax-layer exceptions."""


class SyntaxToolsError(Exception):
    """Base class for syntax helper errors."""

    pass


class TreeSitterNotAvailableError(SyntaxToolsError, ImportError):
    """Raised when tree-sitter-language-pack is not installed."""

    pass


class UnsupportedLanguageError(SyntaxToolsError, ValueError):
    """Raised when no grammar is known for a file or language.

    This can happen when:
    - The file extension is not mapped to a language
    - Neither a language nor a file path was given to the parser
    """

    pass
