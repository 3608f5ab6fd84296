"""Error system for Infect."""

from infect.foundation.errors.errors import (
    ERROR_MESSAGES,
    RECOVERY_HINTS,
    ErrorCode,
    InfectError,
    config_error,
    runtime_error,
)

__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "RECOVERY_HINTS",
    "InfectError",
    "config_error",
    "runtime_error",
]
