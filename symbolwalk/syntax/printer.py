"""Render syntax nodes back to whitespace-normalized source text.

Two layouts are used:
- token layout for ';'/brace grammars (C#, Java, C, C++): the node's tokens
  are re-emitted with canonical spacing, one statement per line and one
  indentation level per brace block
- line layout for everything else: the node's own lines are re-anchored,
  dedented and stripped of trailing whitespace and blank-line runs; lines
  inside multi-line string literals are copied unchanged

Both layouts are stable: rendering the re-parsed output yields the same text.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

from symbolwalk.settings import get_settings
from symbolwalk.syntax.languages import (
    TreeSitterLanguage,
    language_for_root,
    uses_token_layout,
)
from symbolwalk.syntax.navigation import find_descendants

logger = logging.getLogger(__name__)

# Nodes emitted verbatim as a single token
ATOMIC_TYPES: frozenset[str] = frozenset(
    {
        "interpolated_string_expression",
        "interpolated_verbatim_string_expression",
        "raw_string_literal",
        "verbatim_string_literal",
        "string_literal",
        "character_literal",
        "char_literal",
        "text_block",
        "concatenated_string",
        "comment",
        "line_comment",
        "block_comment",
    }
)

# Braces of these parents stay on one line: `new[] { 1, 2 }`, `{ get; set; }`
INLINE_BRACE_PARENTS: frozenset[str] = frozenset(
    {
        "initializer_expression",
        "accessor_list",
        "anonymous_object_creation_expression",
        "collection_expression",
        "array_initializer",
        "element_value_array_initializer",
        "initializer_list",
    }
)

GENERIC_BRACKET_PARENTS: frozenset[str] = frozenset(
    {
        "type_argument_list",
        "type_parameter_list",
        "type_arguments",
        "type_parameters",
        "template_argument_list",
        "template_parameter_list",
    }
)

LABEL_COLON_PARENTS: frozenset[str] = frozenset(
    {
        "case_switch_label",
        "default_switch_label",
        "switch_label",
        "case_statement",
        "labeled_statement",
        "argument",
        "name_colon",
    }
)

# Keywords that keep a space before an opening parenthesis
SPACED_KEYWORDS: frozenset[str] = frozenset(
    {
        "if",
        "while",
        "for",
        "foreach",
        "switch",
        "catch",
        "using",
        "lock",
        "fixed",
        "return",
        "when",
        "in",
        "is",
        "as",
        "await",
        "throw",
        "yield",
        "else",
        "do",
        "case",
        "and",
        "or",
        "not",
        "synchronized",
        "try",
    }
)

NO_SPACE_BEFORE: frozenset[str] = frozenset({")", "]", ";", ",", ".", "?.", "->", "::"})
NO_SPACE_AFTER: frozenset[str] = frozenset({"(", "[", ".", "?.", "->", "::", "@"})
PREFIX_OPERATORS: frozenset[str] = frozenset({"-", "+", "!", "~", "++", "--", "&", "*", "^"})
PREFIX_PARENTS: frozenset[str] = frozenset(
    {"prefix_unary_expression", "unary_expression", "pointer_expression", "update_expression"}
)
POSTFIX_PARENTS: frozenset[str] = frozenset({"postfix_unary_expression", "update_expression"})

# Character pairs that lex as one token when two tokens are glued: `- -x` vs `--x`
FUSING_PAIRS: frozenset[str] = frozenset({"++", "--", "&&", "||", "//", "/*"})

# Conditional directives: the directive line is one token, the code it
# guards is laid out like any other code
CONDITIONAL_DIRECTIVE_TYPES: frozenset[str] = frozenset(
    {"preproc_if", "preproc_ifdef", "preproc_elif", "preproc_elifdef", "preproc_else"}
)

# Literals whose continuation lines are part of their value (line layout)
MULTILINE_LITERAL_TYPES: frozenset[str] = frozenset(
    {
        "string",
        "template_string",
        "raw_string_literal",
        "interpreted_string_literal",
        "string_literal",
    }
)


@dataclass
class _Token:
    text: str
    parent_type: str
    grandparent_type: str = ""
    starts_line: bool = False
    ends_line: bool = False
    is_postfix: bool = False

    @property
    def is_word(self) -> bool:
        head = self.text[:1]
        return head.isalnum() or head in ("_", "@")


def render_node(node: Any, language: TreeSitterLanguage | None = None) -> str:
    """Render a syntax node to normalized source text.

    Args:
        node: tree-sitter node to render
        language: Grammar of the node's tree (inferred from the root if None)

    Returns:
        Normalized source text, without a trailing line terminator
    """
    settings = get_settings()
    if language is None:
        language = language_for_root(_root_of(node).type)

    if uses_token_layout(language):
        writer = _TokenWriter(settings.render_indentation)
        for token in _tokens(node):
            writer.write(token)
        lines = writer.finish()
    else:
        lines = _normalized_lines(node)

    logger.debug("Rendered %s node as %d line(s)", node.type, len(lines))
    return settings.render_end_of_line.join(lines)


def _root_of(node: Any) -> Any:
    while node.parent is not None:
        node = node.parent
    return node


def _node_text(node: Any) -> str:
    text = node.text
    if text is None:
        return ""
    return text.decode("utf-8", errors="replace")


def _is_atomic(node: Any) -> bool:
    return node.child_count == 0 or node.type in ATOMIC_TYPES or node.type.startswith("preproc")


def _is_directive(node: Any) -> bool:
    # `#endif`, `#else` and friends are anonymous leaves of the conditional node
    return node.type.startswith(("preproc", "#"))


def _tokens(node: Any) -> list[_Token]:
    source = _root_of(node).text or b""
    tokens: list[_Token] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in CONDITIONAL_DIRECTIVE_TYPES:
            line_end = source.find(b"\n", current.start_byte)
            if line_end < 0 or line_end > current.end_byte:
                line_end = current.end_byte
            directive = source[current.start_byte : line_end].decode("utf-8", errors="replace")
            tokens.append(_directive_token(directive.strip(), current))
            stack.extend(reversed([c for c in current.children if c.start_byte >= line_end]))
            continue
        if not _is_atomic(current):
            stack.extend(reversed(current.children))
            continue

        text = _node_text(current).strip()
        if not text:
            # MISSING nodes have no text
            continue
        if _is_directive(current):
            tokens.append(_directive_token(text, current))
            continue
        parent = current.parent
        parent_type = parent.type if parent is not None else ""
        grandparent = parent.parent if parent is not None else None
        tokens.append(
            _Token(
                text=text,
                parent_type=parent_type,
                grandparent_type=grandparent.type if grandparent is not None else "",
                ends_line=text.startswith("//"),
                is_postfix=parent_type in POSTFIX_PARENTS
                and parent is not None
                and parent.children[-1] == current,
            )
        )
    return tokens


def _directive_token(text: str, node: Any) -> _Token:
    parent = node.parent
    return _Token(
        text=text,
        parent_type=parent.type if parent is not None else "",
        starts_line=True,
        ends_line=True,
    )


class _TokenWriter:
    """Lay out a token stream line by line."""

    def __init__(self, indentation: str):
        self._indentation = indentation
        self._lines: list[str] = []
        self._line: list[str] = []
        self._depth = 0
        self._paren_depth = 0
        # Parenthesis depth outside each open block: `Run(() => { a(); })`
        self._paren_stack: list[int] = []
        self._inline_depth = 0
        self._newline_pending = False
        self._prev: _Token | None = None

    def write(self, token: _Token) -> None:
        text = token.text
        inline = token.parent_type in INLINE_BRACE_PARENTS or self._inline_depth > 0

        if token.starts_line:
            self._break()
        if text == "}" and not inline:
            self._depth = max(self._depth - 1, 0)
            self._break()
        elif text == "{" and not inline:
            self._break()
        elif self._newline_pending and text not in (";", ",", ")", "="):
            self._break()
        self._newline_pending = False

        if self._line and self._prev is not None and _needs_space(self._prev, token):
            self._line.append(" ")
        if not self._line:
            self._line.append(self._indentation * self._depth)
        self._line.append(text)

        if text == "(":
            self._paren_depth += 1
        elif text == ")":
            self._paren_depth = max(self._paren_depth - 1, 0)
        elif text == "{":
            if inline:
                self._inline_depth += 1
            else:
                self._depth += 1
                self._paren_stack.append(self._paren_depth)
                self._paren_depth = 0
                self._break()
        elif text == "}":
            if inline and self._inline_depth > 0:
                self._inline_depth -= 1
                if token.parent_type == "accessor_list" and not self._inline_depth:
                    self._newline_pending = True
            else:
                if self._paren_stack:
                    self._paren_depth = self._paren_stack.pop()
                self._newline_pending = True
        elif text == ";" and self._paren_depth == 0 and self._inline_depth == 0:
            self._break()
        elif text == "," and token.parent_type == "switch_expression" and not self._paren_depth:
            self._break()
        elif text == "]" and token.parent_type == "attribute_list":
            if token.grandparent_type.endswith("_declaration"):
                self._break()

        if token.ends_line:
            self._break()
        self._prev = token

    def _break(self) -> None:
        if self._line:
            self._lines.append("".join(self._line).rstrip())
            self._line = []

    def finish(self) -> list[str]:
        self._break()
        return self._lines


def _needs_space(prev: _Token, cur: _Token) -> bool:
    if prev.text[-1:] + cur.text[:1] in FUSING_PAIRS:
        return True
    if cur.text in NO_SPACE_BEFORE or prev.text in NO_SPACE_AFTER:
        return False
    if prev.text == "<" and prev.parent_type in GENERIC_BRACKET_PARENTS:
        return False
    if cur.text in ("<", ">") and cur.parent_type in GENERIC_BRACKET_PARENTS:
        return False
    if prev.text in PREFIX_OPERATORS and prev.parent_type in PREFIX_PARENTS and not prev.is_postfix:
        return False
    if cur.is_postfix:
        return False
    if cur.text == ":" and cur.parent_type in LABEL_COLON_PARENTS:
        return False
    if cur.text == "?" and cur.parent_type == "nullable_type":
        return False
    if prev.text == ")" and prev.parent_type == "cast_expression":
        return False
    if cur.text in ("(", "["):
        if prev.text in (")", "]"):
            return False
        if prev.text == ">" and prev.parent_type in GENERIC_BRACKET_PARENTS:
            return False
        if prev.is_word and prev.text not in SPACED_KEYWORDS:
            return False
    return True


def _normalized_lines(node: Any) -> list[str]:
    source = _root_of(node).text or b""
    line_start = source.rfind(b"\n", 0, node.start_byte) + 1
    line = source[line_start : node.start_byte]
    lead = line[: len(line) - len(line.lstrip())].decode("utf-8", errors="replace")

    rows = [raw.removesuffix("\r") for raw in (lead + _node_text(node)).split("\n")]
    open_rows, continued_rows = _literal_rows(node)
    margin = os.path.commonprefix(
        [
            raw[: len(raw) - len(raw.lstrip())]
            for row, raw in enumerate(rows)
            if row not in continued_rows and raw.strip()
        ]
    )

    lines: list[str] = []
    for row, raw in enumerate(rows):
        if row in continued_rows:
            # Inside a literal: the text up to the closing delimiter is its value
            lines.append(raw if row in open_rows else raw.rstrip())
            continue
        text = raw[len(margin) :] if raw.startswith(margin) else raw.lstrip()
        if row not in open_rows:
            text = text.rstrip()
        if not text and (not lines or not lines[-1]):
            continue
        lines.append(text)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def _literal_rows(node: Any) -> tuple[set[int], set[int]]:
    """Rows, relative to the node, that end inside or start inside a multi-line literal."""
    first_row = node.start_point[0]
    open_rows: set[int] = set()
    continued_rows: set[int] = set()
    for literal in find_descendants(node, MULTILINE_LITERAL_TYPES):
        start = literal.start_point[0] - first_row
        end = literal.end_point[0] - first_row
        open_rows.update(range(start, end))
        continued_rows.update(range(start + 1, end + 1))
    return open_rows, continued_rows
