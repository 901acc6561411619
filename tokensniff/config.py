"""Configuration for TokenSniff.

Configuration lives in ``.tokensniff/config.json`` at a project root.
``SnifferConfig.discover`` walks up from a directory to find it; the CLI
can also point at a file with ``--config``. Missing keys take their
defaults; invalid values raise ConfigurationError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from tokensniff import __version__
from tokensniff.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    CONSTRUCTOR_NAME,
    DEFAULT_IGNORE_DIRS,
    DEFAULT_SOURCE_PATTERNS,
)
from tokensniff.rules.registry import available_rules
from tokensniff.tokens.backends import BACKEND_NAMES
from tokensniff.types.errors import (
    ConfigurationError,
    ErrorContext,
    ErrorCode,
    RecoveryAction,
    ResourceError,
)
from tokensniff.utils.logger import logger

_STRING_LIST_FIELDS = ("rules", "exclude", "declarators", "patterns", "ignored")


@dataclass
class SnifferConfig:
    """Settings for a check run.

    Attributes:
        version: Version of TokenSniff that wrote the file.
        rules: Enabled rule names. Empty means every builtin rule.
        exclude: Rule names to disable.
        declarators: Visibility modifiers whose properties are checked.
        constructor_name: Name of the constructor method.
        test_namespace_prefix: Namespace prefix that marks test code.
        tokenizer: Preferred tokenizer backend.
        patterns: Glob patterns selecting files inside directories.
        ignored: Directory names skipped during traversal.
        jobs: Number of files analysed in parallel.
    """

    version: str = __version__
    rules: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    declarators: list[str] = field(default_factory=lambda: ["private"])
    constructor_name: str = CONSTRUCTOR_NAME
    test_namespace_prefix: str = "Tests\\"
    tokenizer: str = "lexer"
    patterns: list[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_PATTERNS))
    ignored: list[str] = field(default_factory=lambda: sorted(DEFAULT_IGNORE_DIRS))
    jobs: int = 1

    def __post_init__(self) -> None:
        self.validate()

    # ================================================================
    # Validation
    # ================================================================

    def validate(self) -> None:
        """Check every value.

        Raises:
            ConfigurationError: On the first invalid value.
        """
        for name in _STRING_LIST_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigurationError(
                    f"{name} must be a list of strings, got {value!r}",
                    user_message=f"'{name}' must be a list of strings, e.g. [\"private\"].",
                )

        known = set(available_rules())
        unknown = [name for name in [*self.rules, *self.exclude] if name not in known]
        if unknown:
            raise ConfigurationError(
                f"Unknown rule(s): {', '.join(unknown)}",
                user_message=f"Unknown rule name(s): {', '.join(unknown)}.",
                recovery_actions=[
                    RecoveryAction(
                        description="List the available rules",
                        command="tokensniff rules",
                    )
                ],
            )

        if self.tokenizer not in BACKEND_NAMES:
            raise ConfigurationError(
                f"Unknown tokenizer: {self.tokenizer}",
                user_message=(
                    f"Unknown tokenizer '{self.tokenizer}'. "
                    f"Choose one of: {', '.join(BACKEND_NAMES)}."
                ),
            )

        if not self.declarators:
            raise ConfigurationError(
                "declarators must not be empty",
                user_message="At least one declarator (e.g. 'private') is required.",
            )

        if not isinstance(self.jobs, int) or isinstance(self.jobs, bool) or self.jobs < 1:
            raise ConfigurationError(
                f"jobs must be a positive integer, got {self.jobs!r}",
                user_message="The number of jobs must be at least 1.",
            )

        if not isinstance(self.constructor_name, str) or not self.constructor_name:
            raise ConfigurationError(
                "constructor_name must not be empty",
                user_message="The constructor name must not be empty.",
            )

    # ================================================================
    # Conversion
    # ================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnifferConfig:
        """Create from a dictionary. Unknown keys are ignored with a warning."""
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration root must be a JSON object",
                user_message="The configuration file must contain a JSON object.",
            )
        names = {f.name for f in fields(cls)}
        extra = sorted(set(data) - names)
        if extra:
            logger.warning("Ignoring unknown config key(s): {}", ", ".join(extra))
        return cls(**{k: v for k, v in data.items() if k in names})

    def with_overrides(self, **overrides: Any) -> SnifferConfig:
        """Return a copy with non-None overrides applied (and validated)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    # ================================================================
    # Files
    # ================================================================

    @classmethod
    def load(cls, path: str | Path) -> SnifferConfig:
        """Load configuration from a JSON file.

        Raises:
            ResourceError: If the file cannot be read.
            ConfigurationError: If the file is not valid JSON or has
                invalid values.
        """
        config_path = Path(path)
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ResourceError(
                f"Cannot read config file {config_path}: {e}",
                user_message=f"Could not read configuration file {config_path}.",
                context=ErrorContext(
                    operation="load_config",
                    file_path=str(config_path),
                    component="config",
                ),
                original_error=e,
                code=ErrorCode.MISSING_CONFIG,
            ) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in {config_path}: {e}",
                user_message=f"Configuration file {config_path} is not valid JSON.",
                context=ErrorContext(
                    operation="load_config",
                    file_path=str(config_path),
                    component="config",
                ),
                original_error=e,
            ) from e

        logger.debug("Loaded config from {}", config_path)
        return cls.from_dict(data)

    @classmethod
    def discover(cls, start: str | Path | None = None) -> SnifferConfig:
        """Find the nearest config file at or above ``start``.

        Returns defaults when no config file exists.
        """
        path = find_config_file(start)
        if path is None:
            return cls()
        return cls.load(path)

    def save(self, root: str | Path) -> Path:
        """Write this configuration under ``root``; return the file path."""
        config_dir = Path(root) / CONFIG_DIR_NAME
        config_file = config_dir / CONFIG_FILE_NAME
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            config_file.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise ResourceError(
                f"Cannot write config file {config_file}: {e}",
                user_message=f"Could not write configuration file {config_file}.",
                original_error=e,
                code=ErrorCode.FILE_WRITE_FAILED,
            ) from e
        return config_file


def find_config_file(start: str | Path | None = None) -> Path | None:
    """Return the first ``.tokensniff/config.json`` at or above ``start``."""
    current = Path(start) if start is not None else Path.cwd()
    current = current.resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None
