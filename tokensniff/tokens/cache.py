"""Token stream cache shared across checks of the same files.

Eliminates redundant tokenizing when a file is checked repeatedly (for
example by several ``check`` runs in one process, or by a watch loop).

Entries are keyed by backend and file path and hold the hash of the
content they were built from. A stream never goes stale on its own: it
is replaced when the file's content changes, and the least recently
used file is dropped when the cache is full.
"""

from __future__ import annotations

import hashlib
import threading
from collections import OrderedDict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tokensniff.tokens.stream import TokenStream


def content_digest(content: str) -> str:
    """Stable digest of file content."""
    return hashlib.sha1(content.encode("utf-8", errors="replace")).hexdigest()


class TokenCache:
    """LRU cache of token streams, one entry per (backend, file path).

    Thread safety: Uses threading.Lock for concurrent check workers.
    """

    def __init__(self, max_files: int = 500):
        self._entries: OrderedDict[tuple[str, str], tuple[str, TokenStream]] = OrderedDict()
        self._max_files = max_files
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, content: str, file_path: str, backend: str) -> TokenStream | None:
        """Return the stream built by ``backend`` for this exact content."""
        key = (backend, file_path)
        digest = content_digest(content)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry[0] != digest:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return entry[1]

    def put(self, content: str, file_path: str, backend: str, stream: TokenStream) -> None:
        """Store ``stream``, replacing any stream for an older version of the file."""
        key = (backend, file_path)
        with self._lock:
            self._entries[key] = (content_digest(content), stream)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_files:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    @property
    def stats(self) -> dict[str, int | float]:
        """Cache statistics."""
        lookups = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / lookups * 100, 1) if lookups else 0.0,
        }
