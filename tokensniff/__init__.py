"""
TokenSniff - Token-stream static analysis for PHP sources.

Provides:
- A PHP tokenizer host (regex lexer and tree-sitter backends)
- Boundary-aware token stream queries (statement ends, scopes, brackets)
- Rules that walk the token stream and report findings
- A check service and CLI for running rules over a codebase

The flagship rule reports nullable class properties that are never
assigned, neither at declaration nor in the constructor.
"""

__version__ = "0.1.0"
