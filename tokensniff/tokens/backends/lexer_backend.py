"""Regex-based PHP lexer backend.

Produces tokens with PHP_CodeSniffer conventions: whitespace and
comments are kept as tokens, ``//`` comments include their line break,
a ``?`` in type position is a nullable marker, and any word after
``->``, ``::`` or ``function`` is a bare identifier.

Priority: 50 (above tree-sitter at 10). Its token boundaries are the
ones the rules were written against.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tokensniff.tokens.lexicon import (
    PUNCTUATION,
    classify_variable,
    classify_word,
    is_type_position,
)
from tokensniff.tokens.types import Token, TokenKind

logger = logging.getLogger(__name__)


@dataclass
class LexRule:
    """A named regex alternative of the lexer."""

    name: str
    pattern: str


# Order matters: earlier alternatives win at the same offset.
PHP_RULES: list[LexRule] = [
    LexRule("close_tag", r"\?>(?:\r?\n)?"),
    LexRule("doc_comment", r"/\*\*(?!/).*?(?:\*/|\Z)"),
    LexRule("block_comment", r"/\*.*?(?:\*/|\Z)"),
    LexRule("line_comment", r"(?://|#(?!\[))[^\r\n?]*(?:\?(?!>)[^\r\n?]*)*(?:\r?\n)?"),
    LexRule("whitespace", r"\s+"),
    LexRule("variable", r"\$[a-zA-Z_\x80-\uffff][a-zA-Z0-9_\x80-\uffff]*"),
    LexRule(
        "heredoc",
        r"<<<[ \t]*(?P<q>[\"']?)(?P<label>[a-zA-Z_][a-zA-Z0-9_]*)(?P=q)\r?\n"
        r".*?^[ \t]*(?P=label)\b",
    ),
    LexRule("single_quoted", r"'(?:[^'\\]|\\.)*'"),
    LexRule("double_quoted", r"\"(?:[^\"\\]|\\.)*\""),
    LexRule("backtick", r"`(?:[^`\\]|\\.)*`"),
    LexRule(
        "number",
        r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
        r"|(?:\d[\d_]*(?:\.\d[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?",
    ),
    LexRule("word", r"[a-zA-Z_\x80-\uffff][a-zA-Z0-9_\x80-\uffff]*"),
    LexRule(
        "operator",
        r"\?->|<=>|\*\*=|\?\?=|<<=|>>=|===|!==|\.\.\."
        r"|->|=>|::|\?\?|==|!=|<>|<=|>=|\+\+|--|&&|\|\|"
        r"|\+=|-=|\*=|/=|\.=|%=|&=|\|=|\^=|<<|>>|\*\*|#\["
        r"|[-+*/%=<>!&|^~.?:;,(){}\[\]@\\$]",
    ),
]

_PHP_PATTERN = re.compile(
    "|".join(f"(?P<{rule.name}>{rule.pattern})" for rule in PHP_RULES),
    re.DOTALL | re.MULTILINE,
)

_OPEN_TAG = re.compile(r"<\?php(?:[ \t]|\r?\n)?|<\?=|<\?(?!xml)", re.IGNORECASE)

_STRING_RULES = frozenset({"heredoc", "single_quoted", "double_quoted", "backtick"})


class _Lexer:
    """Single-use lexer state for one file."""

    def __init__(self, content: str) -> None:
        self._content = content
        self._tokens: list[Token] = []
        self._line = 1
        self._column = 1
        self._previous: Token | None = None  # previous non-empty token
        self._ternaries = 0

    def run(self) -> list[Token]:
        offset = 0
        length = len(self._content)
        while offset < length:
            opener = _OPEN_TAG.search(self._content, offset)
            if opener is None:
                self._emit(TokenKind.INLINE_HTML, self._content[offset:])
                break
            if opener.start() > offset:
                self._emit(TokenKind.INLINE_HTML, self._content[offset : opener.start()])
            self._emit(TokenKind.OPEN_TAG, opener.group(0))
            offset = self._lex_php(opener.end())
        return self._tokens

    def _lex_php(self, offset: int) -> int:
        """Lex PHP code from ``offset`` until a close tag; return the new offset."""
        length = len(self._content)
        while offset < length:
            match = _PHP_PATTERN.match(self._content, offset)
            if match is None:
                # Stray byte the rules do not cover; keep it as an opaque token.
                self._emit(TokenKind.OTHER, self._content[offset])
                offset += 1
                continue

            rule = match.lastgroup
            text = match.group(0)
            offset = match.end()

            if rule == "close_tag":
                self._emit(TokenKind.CLOSE_TAG, text)
                self._previous = None
                return offset
            self._emit(self._kind_for(rule, text, offset), text)

        return offset

    def _kind_for(self, rule: str, text: str, end: int) -> TokenKind:
        if rule == "doc_comment":
            return TokenKind.DOC_COMMENT
        if rule in ("block_comment", "line_comment"):
            return TokenKind.COMMENT
        if rule == "whitespace":
            return TokenKind.WHITESPACE
        if rule == "variable":
            return classify_variable(text)
        if rule in _STRING_RULES:
            return TokenKind.STRING
        if rule == "number":
            return TokenKind.NUMBER
        if rule == "word":
            return classify_word(text, self._previous)
        return self._classify_operator(text, end)

    def _classify_operator(self, text: str, end: int) -> TokenKind:
        if text == "?":
            if is_type_position(self._previous) and self._name_follows(end):
                return TokenKind.NULLABLE
            self._ternaries += 1
            return TokenKind.INLINE_THEN
        if text == ":" and self._ternaries > 0:
            self._ternaries -= 1
            return TokenKind.INLINE_ELSE
        if text == ";":
            self._ternaries = 0
        return PUNCTUATION.get(text, TokenKind.OPERATOR)

    def _name_follows(self, offset: int) -> bool:
        """Check that a type name (word or namespace separator) follows ``offset``."""
        rest = self._content[offset : offset + 256].lstrip()
        return bool(rest) and (rest[0] == "\\" or rest[0].isalpha() or rest[0] == "_")

    def _emit(self, kind: TokenKind, text: str) -> None:
        token = Token(
            kind=kind,
            text=text,
            index=len(self._tokens),
            line=self._line,
            column=self._column,
        )
        self._tokens.append(token)
        if not token.is_empty and kind not in (TokenKind.INLINE_HTML, TokenKind.OPEN_TAG):
            self._previous = token

        newlines = text.count("\n")
        if newlines:
            self._line += newlines
            self._column = len(text) - text.rfind("\n")
        else:
            self._column += len(text)


class LexerBackend:
    """Regex lexer backend.

    Handles any PHP file, including mixed HTML/PHP templates. Never
    needs a grammar download, so it is always available.
    """

    @property
    def name(self) -> str:
        return "lexer"

    @property
    def priority(self) -> int:
        return 50

    def supports_language(self, language: str) -> bool:
        """Only PHP has a lexer table."""
        return language.lower() == "php"

    def tokenize(self, content: str, file_path: str) -> list[Token]:
        """Split PHP source into tokens.

        Args:
            content: File content.
            file_path: Path to the file (for log messages).

        Returns:
            Tokens in document order.
        """
        tokens = _Lexer(content).run()
        logger.debug("Lexed %d tokens from %s", len(tokens), file_path)
        return tokens
