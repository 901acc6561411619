"""Tests for report formatting and primitive serialization."""

import json
from pathlib import Path

import pytest

from tokensniff.rules.base import Finding
from tokensniff.services import CheckReport, FileResult
from tokensniff.tokens.types import TokenKind
from tokensniff.types.errors import ErrorContext, ResourceError
from tokensniff.utils.report_formatter import (
    ReportFormat,
    ReportFormatter,
    format_finding,
    format_report,
)
from tokensniff.utils.serialization import serialize_to_primitives


@pytest.fixture
def report():
    report = CheckReport()
    finding = Finding(7, "Rule", "Bad thing.", "src/Foo.php", 5, 5)
    report.add(FileResult("src/Foo.php", findings=[finding]))
    report.add(
        FileResult(
            "src/Gone.php",
            error=ResourceError(
                "gone",
                user_message="Could not read src/Gone.php.",
                context=ErrorContext(file_path="src/Gone.php"),
            ),
        )
    )
    return report


class TestText:
    def test_finding_line(self):
        finding = Finding(7, "Rule", "Bad thing.", "src/Foo.php", 5, 9)
        assert format_finding(finding) == "src/Foo.php:5:9: error: Bad thing. [Rule]"

    def test_report(self, report):
        assert format_report(report).splitlines() == [
            "src/Foo.php:5:5: error: Bad thing. [Rule]",
            "src/Gone.php: Could not read src/Gone.php.",
            "1 finding(s) in 1 file, 1 error(s)",
        ]


class TestJson:
    def test_report(self, report):
        data = json.loads(format_report(report, "json"))

        assert data["files_checked"] == 1
        assert data["findings"][0]["line"] == 5
        assert data["errors"][0]["user_message"] == "Could not read src/Gone.php."

    def test_default_format(self, report):
        formatter = ReportFormatter(default_format=ReportFormat.JSON, indent=None)
        assert "\n" not in formatter.format(report)

    def test_unknown_format(self, report):
        with pytest.raises(ValueError):
            format_report(report, "xml")


class TestSerializeToPrimitives:
    """serialize_to_primitives handles the value types reports contain."""

    def test_enum(self):
        assert serialize_to_primitives(TokenKind.VARIABLE) == "variable"

    def test_nested(self):
        value = {"kinds": {TokenKind.COMMA}, "path": Path("a/b.php"), "n": (1, None)}
        assert serialize_to_primitives(value) == {
            "kinds": ["comma"],
            "path": "a/b.php",
            "n": [1, None],
        }

    def test_to_dict_preferred(self):
        finding = Finding(1, "Rule", "m", "a.php")
        assert serialize_to_primitives(finding) == finding.to_dict()
