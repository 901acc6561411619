"""Token rules and the findings they report.

Usage:
    from tokensniff.rules import UninitializedNullableClassPropertyRule
    from tokensniff.engine import RuleEngine

    engine = RuleEngine([UninitializedNullableClassPropertyRule()])
    findings = engine.check(stream, "src/User.php")
"""

from tokensniff.rules.base import Finding, FindingCollector, Rule
from tokensniff.rules.inline_comment import InvalidWhitespaceAfterInlineCommentRule
from tokensniff.rules.nullable_property import (
    ConstructorAssignmentScanner,
    ConstructorInfo,
    ConstructorLocator,
    NullablePropertyClassifier,
    PropertyDeclaration,
    UninitializedNullableClassPropertyRule,
)
from tokensniff.rules.registry import BUILTIN_RULES, available_rules, build_rules
from tokensniff.rules.session import AnalysisSession
from tokensniff.rules.test_annotation import MissingTestAnnotationOnTestFunctionRule

__all__ = [
    # Base types
    "Finding",
    "FindingCollector",
    "Rule",
    "AnalysisSession",
    # Nullable property rule
    "ConstructorAssignmentScanner",
    "ConstructorInfo",
    "ConstructorLocator",
    "NullablePropertyClassifier",
    "PropertyDeclaration",
    "UninitializedNullableClassPropertyRule",
    # Comment rules
    "InvalidWhitespaceAfterInlineCommentRule",
    "MissingTestAnnotationOnTestFunctionRule",
    # Registry
    "BUILTIN_RULES",
    "available_rules",
    "build_rules",
]
