"""Report formatting for the ``check`` command.

Supports two output formats:

- ``text``: one ``file:line:column: error: message [RuleName]`` line per
  finding, followed by errors and a summary line
- ``json``: ``{"files_checked", "findings", "errors"}`` for tooling

Usage:
    from tokensniff.utils.report_formatter import format_report

    output = format_report(report, output_format="json")
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import TYPE_CHECKING

from tokensniff.utils.serialization import serialize_to_primitives

if TYPE_CHECKING:
    from tokensniff.rules.base import Finding
    from tokensniff.services.check_service import CheckReport


class ReportFormat(StrEnum):
    """Output formats for check reports."""

    TEXT = "text"
    JSON = "json"


def format_finding(finding: Finding) -> str:
    """Format a finding as a compiler-style line."""
    return (
        f"{finding.file_path}:{finding.line}:{finding.column}: "
        f"{finding.severity}: {finding.message} [{finding.rule_name}]"
    )


class ReportFormatter:
    """Formats check reports as text or JSON.

    Attributes:
        default_format: Format used when none is requested.
        indent: JSON indentation.
    """

    def __init__(self, default_format: ReportFormat = ReportFormat.TEXT, indent: int = 2):
        self.default_format = default_format
        self.indent = indent

    def format(self, report: CheckReport, output_format: ReportFormat | str | None = None) -> str:
        """Format ``report``.

        Raises:
            ValueError: If ``output_format`` is not a known format.
        """
        fmt = ReportFormat(output_format) if output_format else self.default_format
        if fmt is ReportFormat.JSON:
            return self._format_json(report)
        return self._format_text(report)

    def _format_text(self, report: CheckReport) -> str:
        lines = [format_finding(f) for f in report.findings]
        for error in report.errors:
            path = error.context.file_path or "<unknown>"
            lines.append(f"{path}: {error.user_message}")
        lines.append(report.summary())
        return "\n".join(lines)

    def _format_json(self, report: CheckReport) -> str:
        return json.dumps(serialize_to_primitives(report.to_dict()), indent=self.indent)


# Module-level singleton
_formatter = ReportFormatter()


def format_report(report: CheckReport, output_format: ReportFormat | str | None = None) -> str:
    """Format a report using the shared formatter."""
    return _formatter.format(report, output_format)
