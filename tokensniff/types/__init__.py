"""
TokenSniff type definitions.

This module exports the shared value and error types.
"""

# Core types
from .core import ScanRange

# Error types
from .errors import (
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    RecoveryAction,
    ResourceError,
    TokenizeError,
    TokenSniffError,
)

__all__ = [
    # Core types
    "ScanRange",
    # Error types
    "ErrorCode",
    "ErrorSeverity",
    "RecoveryAction",
    "ErrorContext",
    "TokenSniffError",
    "ConfigurationError",
    "TokenizeError",
    "ResourceError",
]
