"""Rule base classes and the Finding result type.

This module defines the abstract base for token rules, the Finding
value they report, and the FindingCollector that gathers findings for
one file.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterator

from tokensniff.tokens.types import TokenKind

if TYPE_CHECKING:
    from tokensniff.rules.session import AnalysisSession


@dataclass(frozen=True)
class Finding:
    """A single reported problem.

    ``position`` is the index of the offending token in its stream;
    ``line`` and ``column`` locate it in the source.
    """

    position: int
    rule_name: str
    message: str
    file_path: str = ""
    line: int = 1
    column: int = 1
    severity: str = "error"

    @property
    def location(self) -> str:
        """Get location string for display."""
        return f"{self.file_path}:{self.line}:{self.column}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "file_path": self.file_path,
            "line": self.line,
            "column": self.column,
            "position": self.position,
            "rule_name": self.rule_name,
            "message": self.message,
            "severity": self.severity,
        }


class FindingCollector:
    """Append-only, ordered sink of findings for one file.

    A second report for the same ``(position, rule_name)`` is dropped.
    """

    def __init__(self) -> None:
        self._findings: list[Finding] = []
        self._seen: set[tuple[int, str]] = set()

    def add(self, finding: Finding) -> bool:
        """Record a finding; return False if it was already reported."""
        key = (finding.position, finding.rule_name)
        if key in self._seen:
            return False
        self._seen.add(key)
        self._findings.append(finding)
        return True

    def __iter__(self) -> Iterator[Finding]:
        return iter(self._findings)

    def __len__(self) -> int:
        return len(self._findings)

    @property
    def findings(self) -> list[Finding]:
        """Findings in discovery order."""
        return list(self._findings)


class Rule(ABC):
    """Abstract base class for token rules.

    Implementations must provide:
    - register(): The token kinds the rule wants to visit
    - process(): Inspect the stream at one registered position
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    @abstractmethod
    def register(self) -> frozenset[TokenKind]:
        """Return the token kinds this rule listens to."""
        pass

    @abstractmethod
    def process(self, session: AnalysisSession, position: int) -> None:
        """Inspect the token at ``position``.

        Rules never raise for malformed token arrangements; they return
        without reporting instead. Findings go through
        ``session.add_finding``.

        Args:
            session: Per-file analysis state (stream, findings, memo).
            position: Index of a token whose kind the rule registered.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
