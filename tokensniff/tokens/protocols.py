"""Backend protocol for the tokenizer host.

Defines the TokenizerBackend Protocol that every tokenizer backend
(regex lexer, tree-sitter) must satisfy.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tokensniff.tokens.types import Token


@runtime_checkable
class TokenizerBackend(Protocol):
    """Abstraction over the engines that turn source text into tokens.

    The TokenizerOrchestrator chains these in a fallback sequence.

    Priority convention:
        50 = lexer (PHP_CodeSniffer token boundaries)
        10 = tree-sitter (grammar-driven, error tolerant)
    """

    @property
    def name(self) -> str:
        """Backend identifier (e.g., 'lexer', 'tree_sitter')."""
        ...

    @property
    def priority(self) -> int:
        """Higher priority backends are tried first."""
        ...

    def supports_language(self, language: str) -> bool:
        """Check if this backend can handle the given language."""
        ...

    def tokenize(self, content: str, file_path: str) -> list[Token]:
        """Split source text into tokens in document order."""
        ...
