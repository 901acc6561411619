"""Tokenizer backends.

Available backends:
- LexerBackend (priority=50): regex lexer with PHP_CodeSniffer token boundaries
- TreeSitterBackend (priority=10): grammar-driven, tolerant of syntax errors
"""

from tokensniff.tokens.backends.lexer_backend import LexerBackend
from tokensniff.tokens.backends.tree_sitter_backend import TreeSitterBackend

__all__ = ["LexerBackend", "TreeSitterBackend", "BACKEND_NAMES"]

BACKEND_NAMES: tuple[str, ...] = ("lexer", "tree_sitter")
