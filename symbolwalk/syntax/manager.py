"""Tree-sitter Manager: Singleton manager for parser lifecycle.

The TreeSitterManager handles:
- Lazy initialization of parsers per language
- Language selection from an explicit language or a file path
- Graceful degradation when tree-sitter is unavailable
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from symbolwalk.syntax.exceptions import (
    TreeSitterNotAvailableError,
    UnsupportedLanguageError,
)
from symbolwalk.syntax.languages import TreeSitterLanguage, detect_language

logger = logging.getLogger(__name__)


class TreeSitterManager:
    """Manages tree-sitter parsers.

    This is a singleton that:
    - Lazily loads parsers per language
    - Serializes parser creation across threads
    - Reports tree-sitter availability once
    """

    _instance: TreeSitterManager | None = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        self._parsers: dict[TreeSitterLanguage, Any] = {}  # language -> Parser
        self._parsers_lock = threading.Lock()
        self._available: bool | None = None

    @classmethod
    def get_instance(cls) -> TreeSitterManager:
        """Get the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        assert cls._instance is not None
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton. For testing only."""
        with cls._lock:
            cls._instance = None

    def is_available(self) -> bool:
        """Check if tree-sitter is available."""
        if self._available is None:
            try:
                import tree_sitter_language_pack  # noqa: F401

                self._available = True
            except ImportError:
                self._available = False
                logger.warning(
                    "tree-sitter-language-pack not installed. "
                    "Tree-sitter features will be disabled."
                )
        return self._available

    def get_parser(self, language: TreeSitterLanguage) -> Any:
        """Get a parser for the specified language.

        Args:
            language: The programming language

        Returns:
            tree_sitter.Parser configured for the language

        Raises:
            TreeSitterNotAvailableError: If tree-sitter-language-pack is not installed
        """
        if not self.is_available():
            raise TreeSitterNotAvailableError(
                "tree-sitter-language-pack not installed. "
                "Run: pip install tree-sitter-language-pack"
            )

        with self._parsers_lock:
            if language not in self._parsers:
                logger.debug("Creating tree-sitter parser for %s", language.value)
                self._parsers[language] = self._create_parser(language)
            return self._parsers[language]

    def _create_parser(self, language: TreeSitterLanguage) -> Any:
        from tree_sitter_language_pack import get_parser

        # tree-sitter-language-pack uses language names directly
        return get_parser(language.value)

    def parse(
        self,
        content: str | bytes | None = None,
        *,
        language: TreeSitterLanguage | None = None,
        file_path: str | Path | None = None,
    ) -> Any:
        """Parse source text and return its syntax tree.

        Args:
            content: Source text (read from file_path if None)
            language: Grammar to use (detected from file_path if None)
            file_path: Optional path used for detection and reading

        Returns:
            tree_sitter.Tree

        Raises:
            TreeSitterNotAvailableError: If tree-sitter not available
            UnsupportedLanguageError: If no grammar can be selected
            FileNotFoundError: If file doesn't exist and no content provided
        """
        if language is None:
            if file_path is None:
                raise UnsupportedLanguageError("Either language or file_path is required")
            language = detect_language(file_path)
            if language is None:
                raise UnsupportedLanguageError(f"Unsupported file type: {Path(file_path).suffix}")

        # Read content if not provided
        if content is None:
            if file_path is None:
                raise ValueError("Either content or file_path is required")
            path = Path(file_path)
            if not path.exists():
                raise FileNotFoundError(f"File not found: {file_path}")
            content = path.read_text(encoding="utf-8", errors="replace")

        source = content.encode("utf-8") if isinstance(content, str) else content
        return self.get_parser(language).parse(source)

    def get_stats(self) -> dict[str, int]:
        """Get parser statistics."""
        return {"parsers_loaded": len(self._parsers)}


def get_treesitter_manager() -> TreeSitterManager:
    """Get the global TreeSitterManager instance."""
    return TreeSitterManager.get_instance()


def parse_source(content: str | bytes, language: TreeSitterLanguage) -> Any:
    """Parse source text with the shared manager.

    Returns:
        tree_sitter.Tree
    """
    return get_treesitter_manager().parse(content, language=language)
