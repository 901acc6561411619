"""Tests for the tree-sitter tokenizer backend.

The backend must produce token kinds that let the rules reach the same
verdicts as the regex lexer.
"""

import pytest

from tokensniff.tokens.backends import TreeSitterBackend
from tokensniff.tokens.stream import TokenStream
from tokensniff.tokens.types import TokenKind

from .php_samples import PHP_SAMPLES


@pytest.fixture(scope="module")
def backend():
    backend = TreeSitterBackend()
    try:
        backend.tokenize("<?php", "probe.php")
    except Exception:
        pytest.skip("tree-sitter not available")
    return backend


@pytest.fixture
def ts_lex(backend):
    def _lex(source, file_path="test.php"):
        return TokenStream(backend.tokenize(source, file_path), file_path=file_path)

    return _lex


class TestBackendProperties:
    """Backend metadata."""

    def test_name_and_priority(self):
        backend = TreeSitterBackend()
        assert backend.name == "tree_sitter"
        assert backend.priority == 10

    def test_php_only(self):
        backend = TreeSitterBackend()
        assert backend.supports_language("php")
        assert backend.supports_language("PHP")
        assert not backend.supports_language("python")


class TestKinds:
    """Kinds the property rule depends on."""

    def test_property_declaration(self, ts_lex):
        stream = ts_lex(PHP_SAMPLES["no_constructor"])
        kinds = {t.text: t.kind for t in stream}

        assert kinds["private"] is TokenKind.DECLARATOR
        assert kinds["?"] is TokenKind.NULLABLE
        assert kinds["$bar"] is TokenKind.VARIABLE

    def test_self_reference(self, ts_lex):
        stream = ts_lex(PHP_SAMPLES["assigned_in_constructor"])
        kinds = {t.text: t.kind for t in stream}

        assert kinds["$this"] is TokenKind.SELF_REFERENCE
        assert kinds["->"] is TokenKind.OBJECT_OPERATOR
        assert kinds["="] is TokenKind.ASSIGN

    def test_no_whitespace_tokens(self, ts_lex):
        stream = ts_lex(PHP_SAMPLES["clean"])
        assert all(t.kind is not TokenKind.WHITESPACE for t in stream)

    def test_positions_are_one_based(self, ts_lex):
        stream = ts_lex(PHP_SAMPLES["no_constructor"])
        private = next(t for t in stream if t.text == "private")
        assert (private.line, private.column) == (5, 5)


class TestParityWithLexer:
    """Both backends lead the rules to the same findings."""

    @pytest.mark.parametrize("sample", sorted(PHP_SAMPLES))
    def test_same_findings(self, ts_lex, lex, full_engine, sample):
        source = PHP_SAMPLES[sample]

        expected = [(f.rule_name, f.line, f.column) for f in full_engine.check(lex(source))]
        actual = [(f.rule_name, f.line, f.column) for f in full_engine.check(ts_lex(source))]

        assert actual == expected
