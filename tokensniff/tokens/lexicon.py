"""Lexeme classification shared by the tokenizer backends.

Maps punctuation and words to token kinds, and decides the two
context-dependent cases: whether a ``?`` is a nullable type marker or a
ternary, and whether a word is a keyword or a bare identifier.
"""

from __future__ import annotations

from tokensniff.constants import (
    PHP_KEYWORDS,
    SELF_REFERENCE,
    TYPE_PREFIX_MODIFIERS,
    VISIBILITY_MODIFIERS,
)
from tokensniff.tokens.types import Token, TokenKind

PUNCTUATION: dict[str, TokenKind] = {
    "=": TokenKind.ASSIGN,
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "{": TokenKind.OPEN_CURLY,
    "}": TokenKind.CLOSE_CURLY,
    "[": TokenKind.OPEN_SQUARE,
    "]": TokenKind.CLOSE_SQUARE,
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    "=>": TokenKind.DOUBLE_ARROW,
    "->": TokenKind.OBJECT_OPERATOR,
    "?->": TokenKind.OBJECT_OPERATOR,
    "::": TokenKind.DOUBLE_COLON,
    "\\": TokenKind.NS_SEPARATOR,
    "#[": TokenKind.ATTRIBUTE,
}

# Previous-token kinds after which a word is always a bare name
_NAME_POSITION_KINDS = frozenset(
    {TokenKind.OBJECT_OPERATOR, TokenKind.DOUBLE_COLON, TokenKind.FUNCTION_KEYWORD}
)


def classify_word(word: str, previous: Token | None = None) -> TokenKind:
    """Classify a bare word.

    Args:
        word: The word text.
        previous: The previous non-empty token, if any.

    Returns:
        The token kind for the word.
    """
    if previous is not None and previous.kind in _NAME_POSITION_KINDS:
        return TokenKind.IDENTIFIER
    lower = word.lower()
    if lower in VISIBILITY_MODIFIERS:
        return TokenKind.DECLARATOR
    if lower == "function":
        return TokenKind.FUNCTION_KEYWORD
    if lower in PHP_KEYWORDS:
        return TokenKind.KEYWORD
    return TokenKind.IDENTIFIER


def classify_variable(text: str) -> TokenKind:
    """``$this`` is the implicit receiver; every other ``$name`` is a variable."""
    if text == SELF_REFERENCE:
        return TokenKind.SELF_REFERENCE
    return TokenKind.VARIABLE


def is_type_position(previous: Token | None) -> bool:
    """Check whether a ``?`` after ``previous`` starts a nullable type.

    Types follow an open parenthesis or comma (parameters), a colon
    (return types), a visibility modifier or a property modifier.
    """
    if previous is None:
        return False
    if previous.kind in (
        TokenKind.OPEN_PAREN,
        TokenKind.COMMA,
        TokenKind.COLON,
        TokenKind.DECLARATOR,
    ):
        return True
    return previous.kind is TokenKind.KEYWORD and previous.keyword in TYPE_PREFIX_MODIFIERS
