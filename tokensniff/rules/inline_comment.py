"""Inline comment whitespace rule.

``// comment`` is accepted; ``//comment``, ``//`` alone and
``//   `` (nothing after the space) are reported.
"""

from __future__ import annotations

import re

from tokensniff.rules.base import Rule
from tokensniff.rules.session import AnalysisSession
from tokensniff.tokens.types import TokenKind

RULE_NAME = "InvalidWhitespaceAfterInlineComment"
MESSAGE = "Inline comments must have a single space between // and comment."

_VALID_INLINE_COMMENT = re.compile(r"//\s\S+")


class InvalidWhitespaceAfterInlineCommentRule(Rule):
    """Reports ``//`` comments not followed by whitespace and text."""

    name = RULE_NAME
    description = "Inline comments must have a single space between // and the comment text."

    def register(self) -> frozenset[TokenKind]:
        return frozenset({TokenKind.COMMENT})

    def process(self, session: AnalysisSession, position: int) -> None:
        text = session.stream[position].text
        if not text.startswith("//"):
            return
        if _VALID_INLINE_COMMENT.search(text) is None:
            session.add_finding(self.name, MESSAGE, position)
