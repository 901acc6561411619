"""PHP tokenizer host.

Turns source text into an immutable TokenStream through a chain of
tokenizer backends.

Usage:
    from tokensniff.tokens import TokenizerOrchestrator

    stream = TokenizerOrchestrator().tokenize(content, "src/User.php")
"""

from tokensniff.tokens.cache import TokenCache
from tokensniff.tokens.orchestrator import TokenizerOrchestrator
from tokensniff.tokens.protocols import TokenizerBackend
from tokensniff.tokens.stream import TokenStream
from tokensniff.tokens.types import EMPTY_KINDS, Token, TokenKind

__all__ = [
    "EMPTY_KINDS",
    "Token",
    "TokenCache",
    "TokenKind",
    "TokenStream",
    "TokenizerBackend",
    "TokenizerOrchestrator",
]
