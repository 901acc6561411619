"""Immutable token stream with boundary-aware queries.

The stream is built once per file. Construction pre-computes bracket
pairs, the braced scope owned by each keyword (``function``, ``class``,
``if`` ...), the owners enclosing every token and the parenthesis
nesting depth. Every query afterwards is read-only.

Queries never raise on bad positions: an out-of-range or inverted window
simply finds nothing, and callers treat "not found" and "out of range"
the same way.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import overload

from tokensniff.constants import SCOPE_OWNER_KEYWORDS
from tokensniff.tokens.types import (
    CLOSER_KINDS,
    OPENER_TO_CLOSER,
    Token,
    TokenKind,
)

# Tokens that end a statement
_END_KINDS = frozenset(
    {
        TokenKind.SEMICOLON,
        TokenKind.COMMA,
        TokenKind.COLON,
        TokenKind.DOUBLE_ARROW,
        TokenKind.CLOSE_PAREN,
        TokenKind.CLOSE_SQUARE,
        TokenKind.CLOSE_CURLY,
        TokenKind.OPEN_TAG,
        TokenKind.CLOSE_TAG,
    }
)

# End tokens that belong to an enclosing construct rather than the statement
_ENCLOSING_END_KINDS = frozenset(
    {
        TokenKind.CLOSE_PAREN,
        TokenKind.CLOSE_SQUARE,
        TokenKind.CLOSE_CURLY,
        TokenKind.OPEN_TAG,
        TokenKind.CLOSE_TAG,
    }
)


def _is_scope_owner(token: Token) -> bool:
    if token.kind is TokenKind.FUNCTION_KEYWORD:
        return True
    return token.kind is TokenKind.KEYWORD and token.keyword in SCOPE_OWNER_KEYWORDS


class TokenStream(Sequence[Token]):
    """An ordered, zero-indexed, immutable sequence of tokens.

    Usage:
        stream = TokenStream(tokens, file_path="src/User.php")
        end = stream.end_of_statement(pos)
        name_pos = stream.find_next({TokenKind.VARIABLE}, pos, end)
    """

    def __init__(self, tokens: Iterable[Token], file_path: str = "") -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self.file_path = file_path

        self._brackets: dict[int, int] = {}
        self._scope_owners: dict[int, int] = {}  # opener -> owner
        self._owned_scopes: dict[int, tuple[int, int]] = {}  # owner -> (opener, closer)
        self._enclosing: list[tuple[int, ...]] = []
        self._paren_depth: list[int] = []

        self._index_structure()

    # ================================================================
    # Sequence protocol
    # ================================================================

    def __len__(self) -> int:
        return len(self._tokens)

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Token, ...]: ...

    def __getitem__(self, index):
        return self._tokens[index]

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __repr__(self) -> str:
        return f"TokenStream(file_path={self.file_path!r}, tokens={len(self)})"

    # ================================================================
    # Construction
    # ================================================================

    def _index_structure(self) -> None:
        """Pair brackets and attach braced scopes to their owners.

        An owner keyword is pending until the next ``{`` at the same
        parenthesis depth claims it, or a ``;`` at that depth drops it
        (abstract methods, ``namespace Foo;``).
        """
        bracket_stack: list[int] = []
        scope_stack: list[int] = []  # owners of the currently open braces
        pending: dict[int, int] = {}  # paren depth -> owner position
        depth = 0

        for pos, token in enumerate(self._tokens):
            self._enclosing.append(tuple(scope_stack))

            kind = token.kind
            if kind is TokenKind.CLOSE_PAREN and depth > 0:
                pending.pop(depth, None)
                depth -= 1
            self._paren_depth.append(depth)

            if _is_scope_owner(token):
                pending[depth] = pos
            elif kind is TokenKind.SEMICOLON:
                pending.pop(depth, None)

            if kind in OPENER_TO_CLOSER:
                bracket_stack.append(pos)
                if kind is TokenKind.OPEN_PAREN:
                    depth += 1
                elif kind is TokenKind.OPEN_CURLY:
                    owner = pending.pop(depth, None)
                    if owner is not None:
                        self._scope_owners[pos] = owner
                    scope_stack.append(owner if owner is not None else -1)
            elif kind in CLOSER_KINDS:
                opener = self._pop_opener(bracket_stack, kind)
                if opener is None:
                    continue
                self._brackets[opener] = pos
                self._brackets[pos] = opener
                if kind is TokenKind.CLOSE_CURLY and scope_stack:
                    owner = scope_stack.pop()
                    if owner >= 0:
                        self._owned_scopes[owner] = (opener, pos)

        self._enclosing = [
            tuple(owner for owner in owners if owner >= 0) for owners in self._enclosing
        ]

    def _pop_opener(self, stack: list[int], closer: TokenKind) -> int | None:
        """Pop the opener matching ``closer``; unbalanced closers are ignored."""
        for i in range(len(stack) - 1, -1, -1):
            if OPENER_TO_CLOSER[self._tokens[stack[i]].kind] is closer:
                opener = stack[i]
                del stack[i:]
                return opener
        return None

    # ================================================================
    # Forward and backward search
    # ================================================================

    def _valid_window(self, start: int, end: int) -> bool:
        return 0 <= start <= end <= len(self._tokens)

    def iter_positions(
        self,
        kinds: Iterable[TokenKind],
        start: int,
        end: int,
    ) -> Iterator[int]:
        """Lazily yield positions in ``[start, end)`` whose kind is in ``kinds``.

        Each call returns a fresh generator; positions are strictly
        increasing and bounded by ``end``.

        Args:
            kinds: Token kinds to match.
            start: First position to inspect.
            end: Exclusive upper bound.

        Yields:
            Matching positions in document order.
        """
        if not self._valid_window(start, end):
            return
        wanted = frozenset(kinds)
        for pos in range(start, end):
            if self._tokens[pos].kind in wanted:
                yield pos

    def find_next(
        self,
        kinds: Iterable[TokenKind],
        start: int,
        end: int | None = None,
    ) -> int | None:
        """Return the first position in ``[start, end)`` with a kind in ``kinds``."""
        if end is None:
            end = len(self._tokens)
        return next(self.iter_positions(kinds, start, end), None)

    def find_previous(
        self,
        kinds: Iterable[TokenKind],
        start: int,
        stop: int = 0,
    ) -> int | None:
        """Return the last position in ``[stop, start]`` with a kind in ``kinds``."""
        if not 0 <= stop <= start < len(self._tokens):
            return None
        wanted = frozenset(kinds)
        for pos in range(start, stop - 1, -1):
            if self._tokens[pos].kind in wanted:
                return pos
        return None

    def next_non_empty(self, start: int) -> int | None:
        """First position at or after ``start`` that is not whitespace or comment."""
        for pos in range(max(start, 0), len(self._tokens)):
            if not self._tokens[pos].is_empty:
                return pos
        return None

    def previous_non_empty(self, start: int) -> int | None:
        """Last position at or before ``start`` that is not whitespace or comment."""
        if start >= len(self._tokens):
            return None
        for pos in range(start, -1, -1):
            if not self._tokens[pos].is_empty:
                return pos
        return None

    # ================================================================
    # Boundaries
    # ================================================================

    def end_of_statement(self, start: int) -> int | None:
        """Find the exclusive end of the statement that begins at ``start``.

        A scope owner (``function``, ``class`` ...) ends at the closing
        brace of its scope. Otherwise the walk skips bracket groups and
        nested scopes and stops at the first ``;``, ``,``, ``:`` or
        ``=>`` (returning that position) or at a closing bracket or PHP
        tag of an enclosing construct (returning one past the last
        non-empty token before it).

        Args:
            start: Position of the statement's first token.

        Returns:
            Exclusive end position, ``len(self)`` if the statement runs to
            the end of the buffer, or None if ``start`` is out of range.
        """
        if not 0 <= start < len(self._tokens):
            return None

        owned = self._owned_scopes.get(start)
        if owned is not None:
            return owned[1]

        last_non_empty = start
        pos = start
        while pos < len(self._tokens):
            token = self._tokens[pos]
            if pos != start and token.kind in _END_KINDS:
                if token.kind in _ENCLOSING_END_KINDS:
                    return last_non_empty + 1
                return pos

            if pos != start and pos in self._owned_scopes:
                pos = self._owned_scopes[pos][1]
            elif token.kind in OPENER_TO_CLOSER and pos in self._brackets:
                pos = self._brackets[pos]

            if not self._tokens[pos].is_empty:
                last_non_empty = pos
            pos += 1

        return len(self._tokens)

    def matching_bracket(self, pos: int) -> int | None:
        """Return the position of the bracket paired with ``pos``."""
        return self._brackets.get(pos)

    def scope_of(self, owner: int) -> tuple[int, int] | None:
        """Return ``(opener, closer)`` of the braced scope owned by ``owner``."""
        return self._owned_scopes.get(owner)

    def scope_owner(self, opener: int) -> int | None:
        """Return the owner keyword position of the brace at ``opener``."""
        return self._scope_owners.get(opener)

    def enclosing_owners(self, pos: int) -> tuple[int, ...]:
        """Owner positions of every braced scope enclosing ``pos``, outermost first."""
        if not 0 <= pos < len(self._tokens):
            return ()
        return self._enclosing[pos]

    def in_parentheses(self, pos: int) -> bool:
        """Check if ``pos`` sits inside a parenthesised list."""
        if not 0 <= pos < len(self._tokens):
            return False
        return self._paren_depth[pos] > 0

    def text(self, start: int, end: int) -> str:
        """Concatenated source text of ``[start, end)``."""
        if not self._valid_window(start, end):
            return ""
        return "".join(t.text for t in self._tokens[start:end])
