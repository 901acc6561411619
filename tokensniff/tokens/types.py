"""Token types shared by every tokenizer backend and the rules.

These types are the single source of truth for the token stream. Both
backends (regex lexer and tree-sitter) produce the same kinds so rules
never need to know which backend ran.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TokenKind(StrEnum):
    """Closed set of token kinds.

    The first group is what the property rules reason about; the rest
    carry the structure needed for boundary queries.
    """

    # Declarations and references
    DECLARATOR = "declarator"  # public / protected / private
    NULLABLE = "nullable"  # ``?`` in type position
    VARIABLE = "variable"
    IDENTIFIER = "identifier"  # bare name (class, method, property, constant)
    ASSIGN = "assign"  # plain ``=`` only
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    FUNCTION_KEYWORD = "function_keyword"
    SELF_REFERENCE = "self_reference"  # ``$this``
    OTHER = "other"

    # Structure
    SEMICOLON = "semicolon"
    COMMA = "comma"
    COLON = "colon"
    DOUBLE_ARROW = "double_arrow"
    OPEN_CURLY = "open_curly"
    CLOSE_CURLY = "close_curly"
    OPEN_SQUARE = "open_square"
    CLOSE_SQUARE = "close_square"
    OBJECT_OPERATOR = "object_operator"  # ``->`` and ``?->``
    DOUBLE_COLON = "double_colon"
    NS_SEPARATOR = "ns_separator"
    INLINE_THEN = "inline_then"  # ternary ``?``
    INLINE_ELSE = "inline_else"  # ternary ``:``
    OPERATOR = "operator"
    KEYWORD = "keyword"
    STRING = "string"
    NUMBER = "number"
    ATTRIBUTE = "attribute"  # ``#[``

    # Trivia and file structure
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    DOC_COMMENT = "doc_comment"
    OPEN_TAG = "open_tag"
    CLOSE_TAG = "close_tag"
    INLINE_HTML = "inline_html"


# Kinds that carry no code (skipped when looking for "the previous token")
EMPTY_KINDS: frozenset[TokenKind] = frozenset(
    {TokenKind.WHITESPACE, TokenKind.COMMENT, TokenKind.DOC_COMMENT}
)

OPENER_TO_CLOSER: dict[TokenKind, TokenKind] = {
    TokenKind.OPEN_PAREN: TokenKind.CLOSE_PAREN,
    TokenKind.OPEN_SQUARE: TokenKind.CLOSE_SQUARE,
    TokenKind.OPEN_CURLY: TokenKind.CLOSE_CURLY,
    TokenKind.ATTRIBUTE: TokenKind.CLOSE_SQUARE,
}

CLOSER_KINDS: frozenset[TokenKind] = frozenset(OPENER_TO_CLOSER.values())


@dataclass(frozen=True)
class Token:
    """A single lexical unit.

    ``index`` is the position in the owning stream; ``line`` and
    ``column`` are 1-indexed source coordinates.
    """

    kind: TokenKind
    text: str
    index: int
    line: int = 1
    column: int = 1

    @property
    def is_empty(self) -> bool:
        """Whitespace and comments."""
        return self.kind in EMPTY_KINDS

    @property
    def keyword(self) -> str:
        """Lowercased text, for case-insensitive keyword comparison."""
        return self.text.lower()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "text": self.text,
            "index": self.index,
            "line": self.line,
            "column": self.column,
        }
