"""Shared constants and helpers for TokenSniff.

Centralizes default file patterns, ignore directories, language
keywords and timezone-aware datetime helpers.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime.

    Usable directly as a ``default_factory`` in dataclass fields.
    """
    return datetime.now(timezone.utc)


# Default source file glob patterns used by the check service and CLI
DEFAULT_SOURCE_PATTERNS: list[str] = [
    "**/*.php",
]

# Maximum file size to analyse (1 MB).
# Files larger than this are skipped to prevent pathological tokenize times.
MAX_FILE_SIZE: int = 1_000_000

# Directories to skip during file traversal.
DEFAULT_IGNORE_DIRS: set[str] = {
    "vendor",
    "node_modules",
    ".git",
    ".svn",
    ".idea",
    "cache",
    ".phpunit.cache",
    ".tokensniff",
}

# Directory (relative to a project root) holding the JSON config file
CONFIG_DIR_NAME: str = ".tokensniff"
CONFIG_FILE_NAME: str = "config.json"

# The constructor method name and the implicit receiver variable
CONSTRUCTOR_NAME: str = "__construct"
SELF_REFERENCE: str = "$this"

# Visibility modifiers; these begin property and method declarations
VISIBILITY_MODIFIERS: frozenset[str] = frozenset({"public", "protected", "private"})

# Modifiers that may sit between a visibility modifier and a type
TYPE_PREFIX_MODIFIERS: frozenset[str] = frozenset(
    {"static", "readonly", "var", "final", "abstract"}
)

# Keywords that open a braced scope
SCOPE_OWNER_KEYWORDS: frozenset[str] = frozenset(
    {
        "class",
        "interface",
        "trait",
        "enum",
        "namespace",
        "function",
        "if",
        "elseif",
        "else",
        "for",
        "foreach",
        "while",
        "do",
        "switch",
        "match",
        "try",
        "catch",
        "finally",
        "declare",
    }
)

CLASS_LIKE_KEYWORDS: frozenset[str] = frozenset({"class", "interface", "trait", "enum"})

# Reserved words emitted as KEYWORD tokens (compared case-insensitively)
PHP_KEYWORDS: frozenset[str] = SCOPE_OWNER_KEYWORDS | TYPE_PREFIX_MODIFIERS | frozenset(
    {
        "abstract",
        "and",
        "array",
        "as",
        "break",
        "callable",
        "case",
        "clone",
        "const",
        "continue",
        "default",
        "echo",
        "empty",
        "enddeclare",
        "endfor",
        "endforeach",
        "endif",
        "endswitch",
        "endwhile",
        "eval",
        "exit",
        "die",
        "extends",
        "false",
        "fn",
        "global",
        "goto",
        "implements",
        "include",
        "include_once",
        "instanceof",
        "insteadof",
        "isset",
        "list",
        "new",
        "null",
        "or",
        "parent",
        "print",
        "require",
        "require_once",
        "return",
        "self",
        "throw",
        "true",
        "unset",
        "use",
        "xor",
        "yield",
    }
)
