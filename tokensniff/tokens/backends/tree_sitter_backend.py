"""Tree-sitter tokenizer backend.

Parses PHP with the tree-sitter grammar from ``tree-sitter-language-pack``
and flattens the concrete syntax tree into the shared token kinds. Leaves
become tokens; a few named nodes (variables, visibility modifiers,
strings, comments) are emitted whole so the result lines up with the
lexer backend.

Whitespace is not part of the tree, so this backend emits no
``WHITESPACE`` tokens. Rules only rely on non-empty tokens.

Priority: 10 (below the lexer at 50).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from tokensniff.tokens.lexicon import (
    PUNCTUATION,
    classify_variable,
    classify_word,
    is_type_position,
)
from tokensniff.tokens.types import Token, TokenKind

if TYPE_CHECKING:
    from tree_sitter import Node, Parser

logger = logging.getLogger(__name__)


# Named nodes emitted as a single token, without descending
_ATOMIC_NODES: dict[str, TokenKind | None] = {
    "variable_name": None,  # VARIABLE or SELF_REFERENCE, decided by text
    "visibility_modifier": TokenKind.DECLARATOR,
    "string": TokenKind.STRING,
    "encapsed_string": TokenKind.STRING,
    "heredoc": TokenKind.STRING,
    "nowdoc": TokenKind.STRING,
    "shell_command_expression": TokenKind.STRING,
    "comment": None,  # COMMENT or DOC_COMMENT, decided by text
    "php_tag": TokenKind.OPEN_TAG,
    "text": TokenKind.INLINE_HTML,
    "integer": TokenKind.NUMBER,
    "float": TokenKind.NUMBER,
}

_GRAMMAR = "php"


class TreeSitterBackend:
    """Tree-sitter-based tokenizer backend.

    Features:
    - Lazy parser initialization (only loads when first used)
    - Tolerates syntax errors (ERROR nodes are flattened like any other)
    - Zero-width MISSING nodes are dropped
    """

    def __init__(self) -> None:
        self._parser: Parser | None = None

    @property
    def name(self) -> str:
        return "tree_sitter"

    @property
    def priority(self) -> int:
        return 10

    def supports_language(self, language: str) -> bool:
        """Tree-sitter tokenizing is wired up for PHP only."""
        return language.lower() == "php"

    def _ensure_parser(self) -> Parser:
        """Lazily initialize the PHP parser."""
        if self._parser is None:
            import tree_sitter_language_pack as tslp
            from tree_sitter import Parser

            self._parser = Parser(tslp.get_language(_GRAMMAR))
            logger.debug("Initialized tree-sitter parser for %s", _GRAMMAR)
        return self._parser

    def tokenize(self, content: str, file_path: str) -> list[Token]:
        """Parse ``content`` and flatten the tree into tokens.

        Args:
            content: File content.
            file_path: Path to the file (for log messages).

        Returns:
            Tokens in document order.
        """
        parser = self._ensure_parser()
        tree = parser.parse(content.encode("utf-8"))
        if tree.root_node.has_error:
            logger.debug("tree-sitter reported syntax errors in %s", file_path)

        tokens: list[Token] = []
        previous: Token | None = None
        for node, kind in self._walk(tree.root_node):
            text = node.text.decode("utf-8", errors="replace") if node.text else ""
            if kind is None:
                kind = self._classify_leaf(node, text, previous)
            token = Token(
                kind=kind,
                text=text,
                index=len(tokens),
                line=node.start_point[0] + 1,
                column=node.start_point[1] + 1,
            )
            tokens.append(token)
            if not token.is_empty and kind not in (TokenKind.OPEN_TAG, TokenKind.INLINE_HTML):
                previous = token

        logger.debug("tree-sitter produced %d tokens from %s", len(tokens), file_path)
        return tokens

    def _walk(self, node: Node) -> Iterator[tuple[Node, TokenKind | None]]:
        """Yield ``(node, kind)`` for every token-level node in document order.

        ``kind`` is None when it depends on the node text or its
        neighbours and must be decided by the caller.
        """
        stack = [node]
        while stack:
            current = stack.pop()
            if current.start_byte == current.end_byte:
                continue
            node_type = current.type
            if node_type in _ATOMIC_NODES:
                kind = _ATOMIC_NODES[node_type]
                if kind is None:
                    kind = self._classify_atomic(current)
                yield current, kind
                continue
            if current.child_count == 0:
                yield current, None
                continue
            stack.extend(reversed(current.children))

    def _classify_atomic(self, node: Node) -> TokenKind:
        text = node.text.decode("utf-8", errors="replace") if node.text else ""
        if node.type == "comment":
            if text.startswith("/**") and not text.startswith("/**/"):
                return TokenKind.DOC_COMMENT
            return TokenKind.COMMENT
        return classify_variable(text)

    def _classify_leaf(self, node: Node, text: str, previous: Token | None) -> TokenKind:
        if text == "?":
            parent = node.parent
            if parent is not None and parent.type == "optional_type":
                return TokenKind.NULLABLE
            if is_type_position(previous):
                return TokenKind.NULLABLE
            return TokenKind.INLINE_THEN
        if text == ":":
            parent = node.parent
            if parent is not None and parent.type == "conditional_expression":
                return TokenKind.INLINE_ELSE
            return TokenKind.COLON
        if text == "?>":
            return TokenKind.CLOSE_TAG
        if node.type == "name":
            return TokenKind.IDENTIFIER
        if text in PUNCTUATION:
            return PUNCTUATION[text]
        if text[:1].isalpha() or text[:1] == "_":
            return classify_word(text, previous)
        return TokenKind.OPERATOR
