"""Infect Error System.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- User-friendly messages
- Recovery hints for the embedding application

Only misuse is raised as an exception. Intent rejection, channel closure
and idleness are ordinary outcomes of the consume loop and are returned
as values (see infect.core.processing).
"""


from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        5xxx - Configuration errors
        6xxx - Runtime errors
    """

    # 5xxx - Configuration Errors
    CONFIG_MISSING = 5001
    CONFIG_INVALID = 5002
    CONFIG_PARSE_ERROR = 5003

    # 6xxx - Runtime Errors
    RUNTIME_STATE_INVALID = 6001
    RUNTIME_EXECUTOR_SHUTDOWN = 6002

    @property
    def category(self) -> str:
        """Get the error category name."""
        prefix = self.value // 1000
        return {
            5: "config",
            6: "runtime",
        }.get(prefix, "unknown")

    @property
    def is_recoverable(self) -> bool:
        """Whether this error type is typically recoverable."""
        non_recoverable = {
            ErrorCode.CONFIG_MISSING,
            ErrorCode.CONFIG_INVALID,
        }
        return self not in non_recoverable


ERROR_MESSAGES: dict[ErrorCode, str] = {
    # Config errors
    ErrorCode.CONFIG_MISSING: "Required configuration '{key}' not found.",
    ErrorCode.CONFIG_INVALID: "Invalid configuration for '{key}': {detail}",
    ErrorCode.CONFIG_PARSE_ERROR: "Failed to parse configuration file '{path}': {detail}",

    # Runtime errors
    ErrorCode.RUNTIME_STATE_INVALID: "Invalid runtime state: {detail}",
    ErrorCode.RUNTIME_EXECUTOR_SHUTDOWN: "Task executor is shut down, cannot spawn '{task}'.",
}


RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.CONFIG_INVALID: [
        "Check the 'reactor' section of .infect/config.yaml",
        "Check INFECT_REACTOR_* environment variables",
    ],
    ErrorCode.CONFIG_PARSE_ERROR: [
        "Validate the YAML syntax of {path}",
    ],
    ErrorCode.RUNTIME_STATE_INVALID: [
        "Wait for the running consume loop to terminate before starting another",
        "Create a separate Reactor for each model",
    ],
    ErrorCode.RUNTIME_EXECUTOR_SHUTDOWN: [
        "Spawn tasks only while the executor is in use",
    ],
}


class InfectError(Exception):
    """Base error type for all Infect errors.

    Example:
        >>> err = InfectError(
        ...     code=ErrorCode.CONFIG_INVALID,
        ...     context={"key": "channel_capacity", "detail": "must be positive"},
        ... )
        >>> print(err)
        [IF-5002] Invalid configuration for 'channel_capacity': must be positive
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted user-friendly message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def is_recoverable(self) -> bool:
        return self.code.is_recoverable

    @property
    def category(self) -> str:
        return self.code.category

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'IF-5002')."""
        return f"IF-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"InfectError(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging."""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "recoverable": self.is_recoverable,
            "recovery_hints": self.recovery_hints,
            "context": self.context,
        }


# Convenience factory functions

def config_error(
    key: str,
    detail: str,
    code: ErrorCode = ErrorCode.CONFIG_INVALID,
    cause: Exception | None = None,
    **extra: Any,
) -> InfectError:
    """Create a configuration error."""
    return InfectError(
        code=code,
        context={"key": key, "detail": detail, **extra},
        cause=cause,
    )


def runtime_error(
    detail: str,
    code: ErrorCode = ErrorCode.RUNTIME_STATE_INVALID,
    cause: Exception | None = None,
    **extra: Any,
) -> InfectError:
    """Create a runtime error."""
    return InfectError(
        code=code,
        context={"detail": detail, **extra},
        cause=cause,
    )
