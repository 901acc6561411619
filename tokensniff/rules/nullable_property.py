"""Uninitialized nullable class property rule.

Flags class properties declared with a nullable type (``?Foo``) that
receive no value: no initializer in the declaration and no direct
``$this->name = ...`` statement in the constructor.

The check is split into three parts that each answer one question:

- ConstructorLocator: where is the constructor, and where does its body start?
- NullablePropertyClassifier: does this declarator declare a nullable property?
- ConstructorAssignmentScanner: does the constructor body assign the property?

Anything that cannot be parsed with confidence is skipped rather than
reported.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tokensniff.constants import CONSTRUCTOR_NAME
from tokensniff.rules.base import Rule
from tokensniff.rules.session import AnalysisSession
from tokensniff.tokens.stream import TokenStream
from tokensniff.tokens.types import TokenKind
from tokensniff.types.core import ScanRange

RULE_NAME = "UninitializedNullableClassProperty"
MESSAGE = "Uninitialized nullable class property."

_CONSTRUCTOR_MEMO_KEY = "constructor"

_REFERENCE_KINDS = frozenset({TokenKind.VARIABLE, TokenKind.SELF_REFERENCE})


# ============================================================================
# Derived records
# ============================================================================


@dataclass(frozen=True)
class ConstructorInfo:
    """Location of the constructor.

    ``body`` starts at the first closing parenthesis after the
    ``function`` keyword and ends at the end of the function. It is None
    when no closing parenthesis exists, in which case nothing can be
    verified against it.
    """

    start: int
    body: ScanRange | None


@dataclass(frozen=True)
class PropertyDeclaration:
    """A declaration classified as a nullable class property."""

    decl_pos: int
    end_pos: int
    name_pos: int
    name: str
    nullable: bool = True
    has_inline_initializer: bool = False


# ============================================================================
# Constructor discovery
# ============================================================================


class ConstructorLocator:
    """Finds the first function named like the constructor."""

    def __init__(self, constructor_name: str = CONSTRUCTOR_NAME) -> None:
        self.constructor_name = constructor_name

    def locate(self, stream: TokenStream) -> ConstructorInfo | None:
        """Return the first constructor in document order, or None.

        The name must be the first identifier of the function header,
        i.e. between ``function`` and its parameter list.
        """
        for pos in stream.iter_positions({TokenKind.FUNCTION_KEYWORD}, 0, len(stream)):
            end = stream.end_of_statement(pos)
            if end is None:
                continue

            params = stream.find_next({TokenKind.OPEN_PAREN}, pos + 1, end)
            header_end = params if params is not None else end
            name_pos = stream.find_next({TokenKind.IDENTIFIER}, pos + 1, header_end)
            if name_pos is None:
                continue
            if stream[name_pos].text.strip() != self.constructor_name:
                continue

            close_paren = stream.find_next({TokenKind.CLOSE_PAREN}, pos, end)
            if close_paren is None:
                return ConstructorInfo(start=pos, body=None)
            return ConstructorInfo(start=pos, body=ScanRange(close_paren, end))
        return None


# ============================================================================
# Declaration classification
# ============================================================================


class NullablePropertyClassifier:
    """Decides whether a declarator starts a nullable property declaration."""

    def classify(self, stream: TokenStream, decl_start: int) -> PropertyDeclaration | None:
        """Classify the declaration starting at ``decl_start``.

        The nullable check runs before the parenthesis check so a
        nullable return type (``private function f(): ?Foo``) is
        dismissed as a method rather than read as a property.

        Args:
            stream: Token stream of the file.
            decl_start: Position of the visibility declarator.

        Returns:
            The property declaration, or None if this is not a nullable
            property (or cannot be parsed).
        """
        # Promoted constructor parameters are parameters, not properties
        if stream.in_parentheses(decl_start):
            return None

        decl_end = stream.end_of_statement(decl_start)
        if decl_end is None:
            return None

        if stream.find_next({TokenKind.NULLABLE}, decl_start + 1, decl_end) is None:
            return None
        if stream.find_next({TokenKind.OPEN_PAREN}, decl_start + 1, decl_end) is not None:
            return None

        name_pos = stream.find_next({TokenKind.VARIABLE}, decl_start, decl_end)
        if name_pos is None:
            return None

        has_initializer = (
            stream.find_next({TokenKind.ASSIGN}, decl_start + 1, decl_end) is not None
        )
        return PropertyDeclaration(
            decl_pos=decl_start,
            end_pos=decl_end,
            name_pos=name_pos,
            name=stream[name_pos].text.lstrip("$"),
            has_inline_initializer=has_initializer,
        )


# ============================================================================
# Constructor body scan
# ============================================================================


class ConstructorAssignmentScanner:
    """Looks for ``$this->name = ...`` inside a constructor body.

    Only direct assignments count. Compound assignment (``??=``, ``.=``),
    list destructuring and assignment through setter methods are not
    recognized.
    """

    def has_assignment(self, stream: TokenStream, body: ScanRange, name: str) -> bool:
        """Check whether ``body`` assigns the property ``name``.

        Returns:
            True on the first qualifying assignment; False when the body
            is exhausted.
        """
        for hit in stream.iter_positions(_REFERENCE_KINDS, body.start + 1, body.end):
            if stream[hit].kind is not TokenKind.SELF_REFERENCE:
                continue

            stmt_end = stream.end_of_statement(hit)
            if stmt_end is None:
                continue

            ident = stream.find_next({TokenKind.IDENTIFIER}, hit, stmt_end)
            if ident is None or stream[ident].text != name:
                continue

            if stream.find_next({TokenKind.ASSIGN}, ident, stmt_end) is not None:
                return True
        return False


# ============================================================================
# Rule
# ============================================================================


class UninitializedNullableClassPropertyRule(Rule):
    """Reports nullable properties that are never initialized."""

    name = RULE_NAME
    description = (
        "Nullable typed properties must be initialized in the declaration "
        "or assigned in the constructor."
    )

    def __init__(
        self,
        declarators: Iterable[str] = ("private",),
        constructor_name: str = CONSTRUCTOR_NAME,
    ) -> None:
        self.declarators = frozenset(d.lower() for d in declarators)
        self.locator = ConstructorLocator(constructor_name)
        self.classifier = NullablePropertyClassifier()
        self.scanner = ConstructorAssignmentScanner()

    def register(self) -> frozenset[TokenKind]:
        return frozenset({TokenKind.DECLARATOR})

    def process(self, session: AnalysisSession, position: int) -> None:
        stream = session.stream
        if stream[position].keyword not in self.declarators:
            return

        declaration = self.classifier.classify(stream, position)
        if declaration is None or declaration.has_inline_initializer:
            return

        constructor = session.cached(
            _CONSTRUCTOR_MEMO_KEY, lambda: self.locator.locate(stream)
        )
        if constructor is None:
            session.add_finding(self.name, MESSAGE, position)
            return
        if constructor.body is None:
            return
        if not self.scanner.has_assignment(stream, constructor.body, declaration.name):
            session.add_finding(self.name, MESSAGE, position)
