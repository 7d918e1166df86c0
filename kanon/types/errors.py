"""
Structured error handling for Kanon.

Every error raised by the linter carries an internal code, a message for
logs, a message for users, and an optional context pointing at the file,
line and rule involved.

Propagation policy:
- MalformedInputError aborts a single lint invocation.
- DuplicateRuleError / RegistrySealedError abort registry setup.
- RuleFailureError never propagates; the evaluator turns it into a violation.
- KanonSystemError wraps an unexpected failure of one file in a batch run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

from kanon.constants import utcnow


class ErrorCode(IntEnum):
    """Internal error codes for categorization."""

    # Input Errors (1000-1999)
    MALFORMED_INPUT = 1001
    UNBALANCED_SCOPE = 1002
    UNTERMINATED_LITERAL = 1003

    # Rule Registry Errors (2000-2999)
    DUPLICATE_RULE = 2001
    REGISTRY_SEALED = 2002

    # Evaluation Errors (3000-3999)
    RULE_FAILED = 3001

    # Configuration Errors (4000-4999)
    INVALID_CONFIG = 4001
    MISSING_CONFIG = 4002

    # File System Errors (5000-5999)
    FILE_NOT_FOUND = 5001
    FILE_READ_FAILED = 5002

    # System Errors (9000-9999)
    INTERNAL_ERROR = 9001


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class RecoveryAction:
    """Suggested action to recover from an error."""

    description: str
    command: str | None = None


@dataclass
class ErrorContext:
    """Context information for an error."""

    operation: str | None = None
    file_path: str | None = None
    line: int | None = None
    column: int | None = None
    rule_id: str | None = None
    timestamp: datetime = field(default_factory=utcnow)
    additional_info: dict[str, Any] = field(default_factory=dict)


class KanonError(Exception):
    """Base error class for Kanon."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        user_message: str,
        severity: str = ErrorSeverity.MEDIUM,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.severity = severity
        self.user_message = user_message
        self.context = context or ErrorContext()
        self.recovery_actions = recovery_actions or []
        self.original_error = original_error

        self.context.timestamp = utcnow()

    def get_formatted_message(self) -> str:
        """Get a formatted error message for display to users."""
        parts = [
            f"[Error] {self.user_message}",
            f"   Code: {self.code.value}",
        ]

        if self.context.operation:
            parts.append(f"   Operation: {self.context.operation}")
        if self.context.file_path:
            parts.append(f"   File: {self.context.file_path}")
        if self.context.line is not None:
            location = f"   Line: {self.context.line}"
            if self.context.column is not None:
                location += f", column {self.context.column}"
            parts.append(location)
        if self.context.rule_id:
            parts.append(f"   Rule: {self.context.rule_id}")

        if self.recovery_actions:
            parts.append("")
            parts.append("Suggested actions:")
            for i, action in enumerate(self.recovery_actions, 1):
                parts.append(f"   {i}. {action.description}")
                if action.command:
                    parts.append(f"      Run: {action.command}")

        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.__class__.__name__,
            "code": self.code.value,
            "message": str(self),
            "user_message": self.user_message,
            "severity": self.severity,
            "context": {
                "operation": self.context.operation,
                "file_path": self.context.file_path,
                "line": self.context.line,
                "column": self.context.column,
                "rule_id": self.context.rule_id,
                "timestamp": self.context.timestamp.isoformat(),
                "additional_info": self.context.additional_info,
            },
            "recovery_actions": [
                {"description": a.description, "command": a.command}
                for a in self.recovery_actions
            ],
            "original_error": str(self.original_error) if self.original_error else None,
        }


class MalformedInputError(KanonError):
    """Source text cannot be parsed: unbalanced brackets or an unterminated literal."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        code: ErrorCode = ErrorCode.MALFORMED_INPUT,
        file_path: str | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=f"{message} (line {line}, column {column})",
            user_message=message,
            severity=ErrorSeverity.HIGH,
            context=ErrorContext(
                operation="parse",
                file_path=file_path,
                line=line,
                column=column,
            ),
        )
        self.line = line
        self.column = column

    def with_path(self, file_path: str) -> "MalformedInputError":
        """Return a copy of this error that names the offending file."""
        return MalformedInputError(
            self.user_message, self.line, self.column, code=self.code, file_path=file_path
        )


class DuplicateRuleError(KanonError):
    """A rule id was registered twice."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_RULE,
            message=f"Rule '{rule_id}' is already registered",
            user_message=f"Duplicate rule identifier '{rule_id}'.",
            severity=ErrorSeverity.HIGH,
            context=ErrorContext(operation="register", rule_id=rule_id),
            recovery_actions=[RecoveryAction("Give each rule a unique identifier.")],
        )
        self.rule_id = rule_id


class RegistrySealedError(KanonError):
    """A rule was registered after the registry was sealed for evaluation."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRY_SEALED,
            message=f"Cannot register '{rule_id}': registry is sealed",
            user_message="Rules must be registered before linting starts.",
            severity=ErrorSeverity.HIGH,
            context=ErrorContext(operation="register", rule_id=rule_id),
        )
        self.rule_id = rule_id


class RuleFailureError(KanonError):
    """A rule raised an unexpected exception while checking a document."""

    def __init__(self, rule_id: str, original_error: Exception) -> None:
        super().__init__(
            code=ErrorCode.RULE_FAILED,
            message=(
                f"Rule '{rule_id}' failed: "
                f"{type(original_error).__name__}: {original_error}"
            ),
            user_message=f"Rule '{rule_id}' failed internally.",
            severity=ErrorSeverity.MEDIUM,
            context=ErrorContext(operation="evaluate", rule_id=rule_id),
            original_error=original_error,
        )
        self.rule_id = rule_id


class ConfigurationError(KanonError):
    """Error related to configuration issues."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
        code: ErrorCode = ErrorCode.INVALID_CONFIG,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            user_message=user_message or "Configuration error occurred.",
            severity=ErrorSeverity.HIGH,
            context=context,
            recovery_actions=recovery_actions,
            original_error=original_error,
        )


class ResourceError(KanonError):
    """Error related to reading source files."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
        code: ErrorCode = ErrorCode.FILE_READ_FAILED,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            user_message=user_message or "Resource access failed.",
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recovery_actions=recovery_actions,
            original_error=original_error,
        )


class KanonSystemError(KanonError):
    """An unexpected failure while linting, outside any single rule."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INTERNAL_ERROR,
            message=message,
            user_message=user_message or "Internal error occurred.",
            severity=ErrorSeverity.CRITICAL,
            context=context,
            recovery_actions=recovery_actions,
            original_error=original_error,
        )
