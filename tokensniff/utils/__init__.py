"""Utility modules for TokenSniff."""

from tokensniff.utils.logger import configure_logging, is_debug_enabled, logger
from tokensniff.utils.report_formatter import ReportFormat, ReportFormatter, format_report
from tokensniff.utils.serialization import serialize_to_primitives

__all__ = [
    "configure_logging",
    "is_debug_enabled",
    "logger",
    "ReportFormat",
    "ReportFormatter",
    "format_report",
    "serialize_to_primitives",
]
