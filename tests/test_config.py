"""Tests for SnifferConfig loading, validation and discovery."""

import json

import pytest

from tokensniff import __version__
from tokensniff.config import SnifferConfig, find_config_file
from tokensniff.rules.registry import build_rules
from tokensniff.types.errors import ConfigurationError, ErrorCode, ResourceError


class TestDefaults:
    """Default values and rule selection."""

    def test_defaults(self):
        config = SnifferConfig()

        assert config.version == __version__
        assert config.rules == []
        assert config.declarators == ["private"]
        assert config.constructor_name == "__construct"
        assert config.test_namespace_prefix == "Tests\\"
        assert config.tokenizer == "lexer"
        assert config.jobs == 1
        assert "vendor" in config.ignored

    def test_all_rules_by_default(self):
        names = [rule.name for rule in build_rules(SnifferConfig())]
        assert names == [
            "UninitializedNullableClassProperty",
            "InvalidWhitespaceAfterInlineComment",
            "MissingTestAnnotationOnTestFunction",
        ]

    def test_exclude(self):
        config = SnifferConfig(exclude=["InvalidWhitespaceAfterInlineComment"])
        names = [rule.name for rule in build_rules(config)]
        assert "InvalidWhitespaceAfterInlineComment" not in names
        assert len(names) == 2

    def test_declarators_passed_to_rule(self):
        config = SnifferConfig(
            rules=["UninitializedNullableClassProperty"],
            declarators=["private", "protected"],
        )
        [rule] = build_rules(config)
        assert rule.declarators == frozenset({"private", "protected"})


class TestValidation:
    """Invalid values raise ConfigurationError."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"rules": ["NoSuchRule"]},
            {"exclude": ["NoSuchRule"]},
            {"tokenizer": "antlr"},
            {"declarators": []},
            {"jobs": 0},
            {"jobs": "4"},
            {"jobs": True},
            {"constructor_name": ""},
            {"constructor_name": 5},
            {"declarators": "private"},
            {"declarators": ["private", 1]},
            {"rules": "UninitializedNullableClassProperty"},
            {"exclude": None},
            {"patterns": "**/*.php"},
            {"ignored": {"vendor": True}},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            SnifferConfig(**kwargs)

    def test_string_declarators_in_file_rejected(self, tmp_path):
        """A bare string would otherwise be read as a set of letters."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"declarators": "private"}))

        with pytest.raises(ConfigurationError) as exc_info:
            SnifferConfig.load(path)
        assert "declarators" in str(exc_info.value)

    def test_unknown_rule_suggests_listing(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SnifferConfig(rules=["Nope"])
        assert exc_info.value.recovery_actions[0].command == "tokensniff rules"

    def test_with_overrides_revalidates(self):
        with pytest.raises(ConfigurationError):
            SnifferConfig().with_overrides(jobs=-1)

    def test_with_overrides_ignores_none(self):
        config = SnifferConfig()
        assert config.with_overrides(rules=None, jobs=None) is config
        assert config.with_overrides(jobs=3).jobs == 3


class TestFiles:
    """Loading, saving and discovery."""

    def test_save_and_load(self, tmp_path):
        original = SnifferConfig(jobs=2, exclude=["InvalidWhitespaceAfterInlineComment"])
        path = original.save(tmp_path)

        assert path == tmp_path / ".tokensniff" / "config.json"
        assert SnifferConfig.load(path) == original

    def test_partial_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"declarators": ["protected"]}))

        config = SnifferConfig.load(path)

        assert config.declarators == ["protected"]
        assert config.tokenizer == "lexer"

    def test_unknown_key_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"jobs": 2, "colour": "blue"}))
        assert SnifferConfig.load(path).jobs == 2

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            SnifferConfig.load(path)

    def test_non_object_root(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            SnifferConfig.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ResourceError) as exc_info:
            SnifferConfig.load(tmp_path / "absent.json")
        assert exc_info.value.code is ErrorCode.MISSING_CONFIG

    def test_discover_walks_upward(self, tmp_path):
        SnifferConfig(jobs=5).save(tmp_path)
        nested = tmp_path / "src" / "Domain"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == (tmp_path / ".tokensniff" / "config.json").resolve()
        assert SnifferConfig.discover(nested).jobs == 5

    def test_discover_from_file(self, tmp_path):
        SnifferConfig(jobs=5).save(tmp_path)
        source = tmp_path / "Foo.php"
        source.write_text("<?php")
        assert SnifferConfig.discover(source).jobs == 5

    def test_discover_defaults(self, tmp_path):
        assert SnifferConfig.discover(tmp_path) == SnifferConfig()
