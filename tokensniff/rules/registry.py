"""Builtin rule registry.

Maps stable rule names to factories that build a configured rule
instance. Rule names are what users enable, exclude and filter on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tokensniff.rules.base import Rule
from tokensniff.rules.inline_comment import InvalidWhitespaceAfterInlineCommentRule
from tokensniff.rules.nullable_property import UninitializedNullableClassPropertyRule
from tokensniff.rules.test_annotation import MissingTestAnnotationOnTestFunctionRule

if TYPE_CHECKING:
    from tokensniff.config import SnifferConfig

RuleFactory = Callable[["SnifferConfig"], Rule]

BUILTIN_RULES: dict[str, RuleFactory] = {
    UninitializedNullableClassPropertyRule.name: lambda config: (
        UninitializedNullableClassPropertyRule(
            declarators=config.declarators,
            constructor_name=config.constructor_name,
        )
    ),
    InvalidWhitespaceAfterInlineCommentRule.name: lambda config: (
        InvalidWhitespaceAfterInlineCommentRule()
    ),
    MissingTestAnnotationOnTestFunctionRule.name: lambda config: (
        MissingTestAnnotationOnTestFunctionRule(
            namespace_prefix=config.test_namespace_prefix,
        )
    ),
}

RULE_CLASSES: dict[str, type[Rule]] = {
    UninitializedNullableClassPropertyRule.name: UninitializedNullableClassPropertyRule,
    InvalidWhitespaceAfterInlineCommentRule.name: InvalidWhitespaceAfterInlineCommentRule,
    MissingTestAnnotationOnTestFunctionRule.name: MissingTestAnnotationOnTestFunctionRule,
}


def available_rules() -> list[str]:
    """Names of all builtin rules, in registration order."""
    return list(BUILTIN_RULES)


def build_rules(config: SnifferConfig) -> list[Rule]:
    """Instantiate the rules enabled by ``config``.

    ``config.rules`` selects rules (empty means all builtin rules);
    ``config.exclude`` removes rules from that selection. Names are
    validated when the configuration is loaded.
    """
    selected = config.rules or available_rules()
    excluded = set(config.exclude)
    return [
        BUILTIN_RULES[name](config)
        for name in available_rules()
        if name in selected and name not in excluded
    ]
