"""Hypothesis property-based tests for the nullable property rule.

Properties tested:
- Termination: the assignment scan visits each position at most once,
  in strictly increasing order, for arbitrary (even malformed) streams
- No self-reference: a body without ``$this`` is never "assigned"
- Resolution: a property is reported iff nothing initializes it
"""

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from tokensniff.engine import RuleEngine
from tokensniff.rules.nullable_property import (
    ConstructorAssignmentScanner,
    UninitializedNullableClassPropertyRule,
)
from tokensniff.tokens.backends import LexerBackend
from tokensniff.tokens.stream import TokenStream
from tokensniff.tokens.types import Token, TokenKind
from tokensniff.types.core import ScanRange


# =============================================================================
# Strategy Definitions
# =============================================================================

TOKEN_SHAPES = [
    (TokenKind.SELF_REFERENCE, "$this"),
    (TokenKind.VARIABLE, "$x"),
    (TokenKind.OBJECT_OPERATOR, "->"),
    (TokenKind.IDENTIFIER, "bar"),
    (TokenKind.IDENTIFIER, "baz"),
    (TokenKind.ASSIGN, "="),
    (TokenKind.SEMICOLON, ";"),
    (TokenKind.COMMA, ","),
    (TokenKind.OPEN_PAREN, "("),
    (TokenKind.CLOSE_PAREN, ")"),
    (TokenKind.OPEN_CURLY, "{"),
    (TokenKind.CLOSE_CURLY, "}"),
    (TokenKind.WHITESPACE, " "),
    (TokenKind.OTHER, "@"),
]

shapes = st.lists(st.sampled_from(TOKEN_SHAPES), max_size=120)

property_names = st.from_regex(r"[a-z][a-zA-Z0-9_]{0,12}", fullmatch=True).filter(
    lambda name: name != "this"
)


def _stream(shape_list):
    return TokenStream(Token(kind, text, i) for i, (kind, text) in enumerate(shape_list))


class RecordingStream(TokenStream):
    """TokenStream that records the positions the scan loop receives."""

    def __init__(self, tokens):
        super().__init__(tokens)
        self.scan_positions = []

    def iter_positions(self, kinds, start, end):
        kinds = frozenset(kinds)
        record = TokenKind.SELF_REFERENCE in kinds
        for pos in super().iter_positions(kinds, start, end):
            if record:
                self.scan_positions.append(pos)
            yield pos


# =============================================================================
# Scanner Properties
# =============================================================================


class TestScannerTermination:
    """The scan loop is bounded by the body and never revisits a position."""

    @given(shape_list=shapes, name=st.sampled_from(["bar", "baz"]))
    @settings(max_examples=200)
    def test_cursor_strictly_increases(self, shape_list, name):
        tokens = [Token(kind, text, i) for i, (kind, text) in enumerate(shape_list)]
        stream = RecordingStream(tokens)
        body = ScanRange(0, len(stream))

        ConstructorAssignmentScanner().has_assignment(stream, body, name)

        positions = stream.scan_positions
        assert all(a < b for a, b in zip(positions, positions[1:]))
        assert all(body.start < p < body.end for p in positions)
        assert len(positions) <= len(stream)

    @given(shape_list=shapes)
    @settings(max_examples=200)
    def test_no_self_reference_never_assigned(self, shape_list):
        """Without $this the scan exhausts the body and reports no assignment."""
        shape_list = [s for s in shape_list if s[0] is not TokenKind.SELF_REFERENCE]
        stream = RecordingStream(
            [Token(kind, text, i) for i, (kind, text) in enumerate(shape_list)]
        )
        body = ScanRange(0, len(stream))

        assert not ConstructorAssignmentScanner().has_assignment(stream, body, "bar")

        variables = [i for i, (kind, _) in enumerate(shape_list) if kind is TokenKind.VARIABLE]
        assert stream.scan_positions == [i for i in variables if i > 0]

    @given(shape_list=shapes)
    def test_end_of_statement_bounded(self, shape_list):
        """end_of_statement always lands inside (start, len]."""
        stream = _stream(shape_list)
        for start in range(len(stream)):
            end = stream.end_of_statement(start)
            assert end is not None
            assert start <= end <= len(stream)


# =============================================================================
# Rule Properties
# =============================================================================


def _check(source):
    stream = TokenStream(LexerBackend().tokenize(source, "p.php"), file_path="p.php")
    return RuleEngine([UninitializedNullableClassPropertyRule()]).check(stream)


class TestResolution:
    """A property is reported exactly when nothing initializes it."""

    @given(name=property_names)
    def test_inline_initializer_always_resolves(self, name):
        source = f"<?php class A {{ private ?Foo ${name} = null; }}"
        assert _check(source) == []

    @given(name=property_names)
    def test_no_constructor_always_reported_once(self, name):
        source = f"<?php class A {{ private ?Foo ${name}; }}"
        assert len(_check(source)) == 1

    @given(name=property_names)
    def test_constructor_assignment_resolves(self, name):
        source = (
            f"<?php class A {{ private ?Foo ${name}; "
            f"public function __construct() {{ $this->{name} = new Foo(); }} }}"
        )
        assert _check(source) == []

    @given(name=property_names, other=property_names)
    def test_other_assignment_does_not_resolve(self, name, other):
        assume(name != other)
        source = (
            f"<?php class A {{ private ?Foo ${name}; "
            f"public function __construct() {{ $this->{other} = new Foo(); }} }}"
        )
        assert len(_check(source)) == 1

    @given(name=property_names)
    def test_non_nullable_never_reported(self, name):
        source = f"<?php class A {{ private Foo ${name}; }}"
        assert _check(source) == []
