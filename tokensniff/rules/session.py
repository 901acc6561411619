"""Per-file analysis session.

Everything a rule learns about one file lives here: the token stream,
the findings and memoized lookups (such as the constructor location).
A session is created for one file and discarded with it, so nothing
leaks from one file into the next.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from tokensniff.rules.base import Finding, FindingCollector
from tokensniff.tokens.stream import TokenStream

T = TypeVar("T")

_MISSING = object()


class AnalysisSession:
    """State for analysing a single file."""

    def __init__(self, stream: TokenStream, file_path: str | None = None) -> None:
        self.stream = stream
        self.file_path = file_path if file_path is not None else stream.file_path
        self.collector = FindingCollector()
        self._memo: dict[str, Any] = {}

    def add_finding(self, rule_name: str, message: str, position: int) -> bool:
        """Report a finding at ``position``.

        Returns:
            True if recorded, False if the same rule already reported
            this position.
        """
        line, column = 1, 1
        if 0 <= position < len(self.stream):
            token = self.stream[position]
            line, column = token.line, token.column
        return self.collector.add(
            Finding(
                position=position,
                rule_name=rule_name,
                message=message,
                file_path=self.file_path,
                line=line,
                column=column,
            )
        )

    def cached(self, key: str, factory: Callable[[], T]) -> T:
        """Return the memoized value for ``key``, computing it on first use.

        None is a valid memoized value ("looked, found nothing") and is
        not recomputed.
        """
        value = self._memo.get(key, _MISSING)
        if value is _MISSING:
            value = factory()
            self._memo[key] = value
        return value

    @property
    def findings(self) -> list[Finding]:
        return self.collector.findings
