"""gamecode - agent conversation loop and tool-call lifecycle."""

from gamecode.config import AgentConfig
from gamecode.context import ContextStore, Role, Turn
from gamecode.errors import (
    AgentError,
    BackendError,
    CompressionError,
    ConfigurationError,
    ErrorKind,
    GamecodeError,
    NotInitializedError,
    ToolError,
    ToolExecutionError,
    ToolReportedError,
)
from gamecode.manager import AgentManager, AgentResponse, ManagerState, ToolResult

__version__ = "0.1.0"

__all__ = [
    "AgentConfig",
    "AgentError",
    "AgentManager",
    "AgentResponse",
    "BackendError",
    "CompressionError",
    "ConfigurationError",
    "ContextStore",
    "ErrorKind",
    "GamecodeError",
    "ManagerState",
    "NotInitializedError",
    "Role",
    "ToolError",
    "ToolExecutionError",
    "ToolReportedError",
    "ToolResult",
    "Turn",
]
