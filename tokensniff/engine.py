"""Rule engine.

Visits every token of a stream once, in document order, and hands the
positions each rule registered for to that rule. Each ``check`` call
runs in a fresh AnalysisSession, so memoized lookups never leak from one
file into another.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from tokensniff.rules.base import Finding, Rule
from tokensniff.rules.session import AnalysisSession
from tokensniff.tokens.stream import TokenStream
from tokensniff.tokens.types import TokenKind
from tokensniff.utils.logger import logger


class RuleEngine:
    """Dispatches tokens to rules and collects their findings.

    Usage:
        engine = RuleEngine(build_rules(config))
        findings = engine.check(stream, "src/User.php")
    """

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules = list(rules)
        self._listeners: dict[TokenKind, list[Rule]] = defaultdict(list)
        for rule in self._rules:
            for kind in rule.register():
                self._listeners[kind].append(rule)

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    def listeners_for(self, kind: TokenKind) -> list[Rule]:
        """Rules registered for ``kind``, in registration order."""
        return list(self._listeners.get(kind, ()))

    def check(self, stream: TokenStream, file_path: str | None = None) -> list[Finding]:
        """Run every rule over ``stream``.

        Args:
            stream: Token stream of one file.
            file_path: Path reported in findings (defaults to the stream's).

        Returns:
            Findings in discovery order.
        """
        session = AnalysisSession(stream, file_path)
        for position, token in enumerate(stream):
            for rule in self._listeners.get(token.kind, ()):
                rule.process(session, position)

        logger.debug(
            "Checked {} ({} tokens): {} finding(s)",
            session.file_path,
            len(stream),
            len(session.findings),
        )
        return session.findings
