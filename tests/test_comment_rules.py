"""Tests for the inline comment and test annotation rules."""

import pytest

from tokensniff.engine import RuleEngine
from tokensniff.rules.inline_comment import (
    MESSAGE as INLINE_MESSAGE,
    InvalidWhitespaceAfterInlineCommentRule,
)
from tokensniff.rules.test_annotation import (
    MissingTestAnnotationOnTestFunctionRule,
    find_doc_comment,
    find_namespace_name,
    fully_qualified,
)

from .php_samples import PHP_SAMPLES


@pytest.fixture
def inline_engine():
    return RuleEngine([InvalidWhitespaceAfterInlineCommentRule()])


@pytest.fixture
def annotation_engine():
    return RuleEngine([MissingTestAnnotationOnTestFunctionRule()])


# ============================================================================
# InvalidWhitespaceAfterInlineComment
# ============================================================================


class TestInlineComment:
    """Inline comments need whitespace then text after //."""

    @pytest.mark.parametrize(
        "comment",
        [
            "// a valid comment",
            "//\tTabbed comment",
            "// x",
        ],
    )
    def test_valid(self, lex, inline_engine, comment):
        stream = lex(f"<?php\n{comment}\n$a = 1;\n")
        assert inline_engine.check(stream) == []

    @pytest.mark.parametrize(
        "comment",
        [
            "//no space",
            "//",
            "//   ",
        ],
    )
    def test_invalid(self, lex, inline_engine, comment):
        stream = lex(f"<?php\n{comment}\n$a = 1;\n")
        findings = inline_engine.check(stream)

        assert len(findings) == 1
        assert findings[0].rule_name == "InvalidWhitespaceAfterInlineComment"
        assert findings[0].message == INLINE_MESSAGE
        assert stream[findings[0].position].text.startswith("//")
        assert findings[0].line == 2

    def test_other_comment_styles_ignored(self, lex, inline_engine):
        stream = lex("<?php\n#no space\n/*no space*/\n/**no space*/\n$a = 1;\n")
        assert inline_engine.check(stream) == []

    def test_trailing_comment(self, lex, inline_engine):
        stream = lex("<?php\n$a = 1; //oops\n$b = 2; // fine\n")
        findings = inline_engine.check(stream)
        assert [f.line for f in findings] == [2]


# ============================================================================
# MissingTestAnnotationOnTestFunction
# ============================================================================


class TestTestAnnotation:
    """Test-named functions in Tests\\ must carry @test."""

    def test_method_missing_annotation(self, lex, annotation_engine):
        stream = lex(PHP_SAMPLES["test_class"])
        findings = annotation_engine.check(stream)

        assert [f.message for f in findings] == [
            "Method \\Tests\\Unit\\UserTest::save_withoutName_throws() "
            "looks like a test but is missing the @test annotation."
        ]
        assert findings[0].rule_name == "MissingTestAnnotationOnTestFunction"
        assert stream[findings[0].position].text == "function"

    def test_namespace_outside_tests_ignored(self, lex, annotation_engine):
        source = PHP_SAMPLES["test_class"].replace("namespace Tests\\Unit;", "namespace App\\Unit;")
        assert annotation_engine.check(lex(source)) == []

    def test_no_namespace_ignored(self, lex, annotation_engine):
        source = "<?php\nfunction save_withoutName_throws() {}\n"
        assert annotation_engine.check(lex(source)) == []

    def test_plain_function(self, lex, annotation_engine):
        source = "<?php\nnamespace Tests\\Unit;\n\nfunction save_withoutName_throws() {}\n"
        findings = annotation_engine.check(lex(source))
        assert [f.message for f in findings] == [
            "Function \\Tests\\Unit\\save_withoutName_throws() "
            "looks like a test but is missing the @test annotation."
        ]

    def test_closure_ignored(self, lex, annotation_engine):
        source = "<?php\nnamespace Tests\\Unit;\n$f = function () {};\n"
        assert annotation_engine.check(lex(source)) == []

    def test_one_line_doc_comment_is_not_enough(self, lex, annotation_engine):
        """The annotation must end its line inside the comment body."""
        source = (
            "<?php\nnamespace Tests\\Unit;\n\nclass ATest\n{\n"
            "    /** @test */\n"
            "    public function a_b_c() {}\n}\n"
        )
        assert len(annotation_engine.check(lex(source))) == 1

    def test_annotation_with_other_tags(self, lex, annotation_engine):
        source = (
            "<?php\nnamespace Tests\\Unit;\n\nclass ATest\n{\n"
            "    /**\n     * Checks something.\n     *\n     * @test\n"
            "     * @group slow\n     */\n"
            "    #[Group('x')]\n"
            "    final public static function a_b_c() {}\n}\n"
        )
        assert annotation_engine.check(lex(source)) == []

    def test_braced_namespace(self, lex, annotation_engine):
        source = (
            "<?php\nnamespace Tests\\Feature {\n"
            "    class LoginTest {\n"
            "        public function login_withBadPassword_fails() {}\n"
            "    }\n}\n"
        )
        findings = annotation_engine.check(lex(source))
        assert len(findings) == 1
        assert "\\Tests\\Feature\\LoginTest::login_withBadPassword_fails()" in findings[0].message

    def test_custom_namespace_prefix(self, lex):
        rule = MissingTestAnnotationOnTestFunctionRule(namespace_prefix="Acceptance\\")
        engine = RuleEngine([rule])
        source = "<?php\nnamespace Acceptance\\Unit;\n\nfunction a_b_c() {}\n"
        assert len(engine.check(lex(source))) == 1

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("create_withName_returnsUser", True),
            ("a_b_c", True),
            ("a_b", False),
            ("a_b_c_d", False),
            ("helperMethod", False),
            ("a__c", False),
        ],
    )
    def test_looks_like_test(self, name, expected):
        rule = MissingTestAnnotationOnTestFunctionRule()
        assert rule.looks_like_test("Tests\\Unit", name) is expected


class TestHelpers:
    """Token helpers used by the annotation rule."""

    def test_find_namespace_name(self, lex):
        stream = lex("<?php\nnamespace Tests\\Unit\\Models;\n\nfunction f() {}\n")
        function_pos = next(t.index for t in stream if t.text == "function")
        assert find_namespace_name(stream, function_pos) == "Tests\\Unit\\Models"

    def test_namespace_relative_name_is_not_declaration(self, lex):
        stream = lex("<?php\nnamespace\\foo();\nfunction f() {}\n")
        function_pos = next(t.index for t in stream if t.text == "function")
        assert find_namespace_name(stream, function_pos) is None

    def test_find_doc_comment_stops_at_code(self, lex):
        stream = lex("<?php\n/** @test */\n$a = 1;\nfunction f() {}\n")
        function_pos = next(t.index for t in stream if t.text == "function")
        assert find_doc_comment(stream, function_pos) is None

    def test_find_doc_comment_body(self, lex):
        stream = lex("<?php\n/**\n * @test\n */\nfunction f() {}\n")
        function_pos = next(t.index for t in stream if t.text == "function")
        assert find_doc_comment(stream, function_pos) == "* @test"

    def test_fully_qualified(self):
        assert fully_qualified("Tests\\Unit", "A") == "\\Tests\\Unit\\A"
        assert fully_qualified(None, "f") == "\\f"
