"""Application-level exception types for gamecode."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gamecode.manager import AgentResponse


class ErrorKind(StrEnum):
    """Failure kinds surfaced by the agent manager."""

    NOT_INITIALIZED = "not_initialized"
    BACKEND = "backend"
    TOOL_EXECUTION = "tool_execution"
    COMPRESSION = "compression"
    CONFIGURATION = "configuration"


class GamecodeError(Exception):
    """Base exception for gamecode."""

    kind: ErrorKind


class ConfigurationError(GamecodeError):
    """Raised when the manager or its backend cannot be constructed."""

    kind = ErrorKind.CONFIGURATION


class AgentError(GamecodeError):
    """Base exception for failures of one conversation turn."""


class NotInitializedError(AgentError):
    """Raised when a conversation operation runs before initialize()."""

    kind = ErrorKind.NOT_INITIALIZED

    def __init__(self, message: str = "Agent manager not initialized. Call initialize() first.") -> None:
        super().__init__(message)


class BackendError(AgentError):
    """Raised when the LLM backend call fails."""

    kind = ErrorKind.BACKEND


class ToolExecutionError(AgentError):
    """Raised when a tool invocation fails hard and aborts the turn."""

    kind = ErrorKind.TOOL_EXECUTION

    def __init__(self, message: str, *, tool_name: str, tool_call_id: str | None = None) -> None:
        super().__init__(message)
        self.tool_name = tool_name
        self.tool_call_id = tool_call_id


class CompressionError(AgentError):
    """Raised when context summarization fails.

    The context store is left as it was before the attempt. When the failure
    happened after a turn completed, that turn's response is kept in
    ``response``.
    """

    kind = ErrorKind.COMPRESSION

    def __init__(self, message: str, *, response: AgentResponse | None = None) -> None:
        super().__init__(message)
        self.response = response


class ToolError(Exception):
    """Raised by a tool adapter when a tool cannot be executed at all."""


class ToolReportedError(Exception):
    """Raised by a tool handler to report a domain failure as result text."""
