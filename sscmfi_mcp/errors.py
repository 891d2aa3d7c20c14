"""Error types for the SSCMFI MCP adapter."""

from __future__ import annotations

from pydantic import ValidationError


class UnknownToolError(Exception):
    """Raised when a requested tool name is not registered (protocol-level error)."""


class ToolExecutionError(Exception):
    """Failure while running a tool; reported in-band with isError."""


class InvalidArgumentsError(ToolExecutionError):
    """Tool arguments failed schema validation; the engine was not called."""


class MalformedResponseError(ToolExecutionError):
    """Engine answered but the body does not have the expected structure."""


def format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
