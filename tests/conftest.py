"""
Pytest configuration and shared fixtures for TokenSniff tests.
"""

from pathlib import Path

import pytest

from tokensniff.engine import RuleEngine
from tokensniff.rules import (
    InvalidWhitespaceAfterInlineCommentRule,
    MissingTestAnnotationOnTestFunctionRule,
    UninitializedNullableClassPropertyRule,
)
from tokensniff.tokens.backends import LexerBackend
from tokensniff.tokens.stream import TokenStream

from .php_samples import PHP_SAMPLES


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def lex():
    """Tokenize PHP source with the regex lexer into a TokenStream."""
    backend = LexerBackend()

    def _lex(source: str, file_path: str = "test.php") -> TokenStream:
        return TokenStream(backend.tokenize(source, file_path), file_path=file_path)

    return _lex


@pytest.fixture
def nullable_engine():
    """RuleEngine running only the nullable property rule."""
    return RuleEngine([UninitializedNullableClassPropertyRule()])


@pytest.fixture
def full_engine():
    """RuleEngine running every builtin rule with default settings."""
    return RuleEngine(
        [
            UninitializedNullableClassPropertyRule(),
            InvalidWhitespaceAfterInlineCommentRule(),
            MissingTestAnnotationOnTestFunctionRule(),
        ]
    )


@pytest.fixture
def php_project(tmp_path) -> Path:
    """A small PHP project on disk with one clean and two offending files."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "Session.php").write_text(PHP_SAMPLES["clean"])
    (src / "Foo.php").write_text(PHP_SAMPLES["no_constructor"])
    (src / "Bar.php").write_text(PHP_SAMPLES["other_property_assigned"])

    vendor = tmp_path / "vendor" / "acme"
    vendor.mkdir(parents=True)
    (vendor / "Ignored.php").write_text(PHP_SAMPLES["no_constructor"])

    (tmp_path / "README.md").write_text("# not php\n")
    return tmp_path
