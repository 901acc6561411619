"""Tokenizer orchestrator that chains backends in priority order.

The TokenizerOrchestrator is the single entry point for turning source
text into a TokenStream. Backends are tried highest priority first (or
the preferred backend first, when one is configured); a backend that
raises is logged and skipped, and the next one is tried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tokensniff.tokens.cache import TokenCache
from tokensniff.tokens.stream import TokenStream
from tokensniff.types.errors import ErrorContext, RecoveryAction, TokenizeError

if TYPE_CHECKING:
    from tokensniff.tokens.protocols import TokenizerBackend

logger = logging.getLogger(__name__)


class TokenizerOrchestrator:
    """Routes tokenizing through backends with fallback.

    Usage:
        orchestrator = TokenizerOrchestrator(preferred="tree_sitter")
        stream = orchestrator.tokenize(content, "src/User.php")
    """

    def __init__(
        self,
        backends: list[TokenizerBackend] | None = None,
        preferred: str | None = None,
        cache: TokenCache | None = None,
    ) -> None:
        if backends is not None:
            self._backends = sorted(backends, key=lambda b: b.priority, reverse=True)
        else:
            from tokensniff.tokens.backends import LexerBackend, TreeSitterBackend

            self._backends = [
                LexerBackend(),  # priority=50
                TreeSitterBackend(),  # priority=10
            ]
        self._preferred = preferred
        self._cache = cache if cache is not None else TokenCache()

    @property
    def backends(self) -> list[TokenizerBackend]:
        """Backends in the order they are tried."""
        if self._preferred is None:
            return list(self._backends)
        first = [b for b in self._backends if b.name == self._preferred]
        rest = [b for b in self._backends if b.name != self._preferred]
        return first + rest

    @property
    def cache(self) -> TokenCache:
        return self._cache

    def register_backend(self, backend: TokenizerBackend) -> None:
        """Register a new backend and re-sort by priority."""
        self._backends.append(backend)
        self._backends.sort(key=lambda b: b.priority, reverse=True)

    def tokenize(
        self,
        content: str,
        file_path: str,
        language: str = "php",
    ) -> TokenStream:
        """Tokenize ``content`` with the first backend that succeeds.

        Args:
            content: File content.
            file_path: Path to the file.
            language: Source language.

        Returns:
            Immutable token stream for the file.

        Raises:
            TokenizeError: If no backend supports the language or all fail.
        """
        failures: list[str] = []
        for backend in self.backends:
            if not backend.supports_language(language):
                continue

            cached = self._cache.get(content, file_path, backend.name)
            if cached is not None:
                return cached

            try:
                tokens = backend.tokenize(content, file_path)
            except Exception as e:
                logger.debug(
                    "Backend %s failed for %s", backend.name, file_path, exc_info=True
                )
                failures.append(f"{backend.name}: {e}")
                continue

            stream = TokenStream(tokens, file_path=file_path)
            self._cache.put(content, file_path, backend.name, stream)
            return stream

        if not failures:
            message = f"No tokenizer backend supports language: {language}"
        else:
            message = f"All tokenizer backends failed for {file_path}: " + "; ".join(failures)
        raise TokenizeError(
            message,
            user_message=f"Could not tokenize {file_path}.",
            context=ErrorContext(
                operation="tokenize",
                file_path=file_path,
                component="tokenizer",
                additional_info={"language": language, "failures": failures},
            ),
            recovery_actions=[
                RecoveryAction(
                    description="Select the regex lexer backend",
                    command="tokensniff check --tokenizer lexer <paths>",
                ),
            ],
        )
