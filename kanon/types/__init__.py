"""
Kanon type definitions.

This module exports the shared value types and the error hierarchy.
"""

# Core types
from .core import RuleCategory, Severity

# Error types
from .errors import (
    ConfigurationError,
    DuplicateRuleError,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    KanonError,
    KanonSystemError,
    MalformedInputError,
    RecoveryAction,
    RegistrySealedError,
    ResourceError,
    RuleFailureError,
)

__all__ = [
    # Core types
    "RuleCategory",
    "Severity",
    # Error types
    "ErrorCode",
    "ErrorSeverity",
    "RecoveryAction",
    "ErrorContext",
    "KanonError",
    "MalformedInputError",
    "DuplicateRuleError",
    "RegistrySealedError",
    "RuleFailureError",
    "ConfigurationError",
    "ResourceError",
    "KanonSystemError",
]
