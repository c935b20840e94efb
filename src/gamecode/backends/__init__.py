"""LLM backend clients for gamecode."""

from gamecode.backends.base import Backend, BackendResponse, ToolCall, parse_embedded_tool_calls
from gamecode.backends.openai_compat import OpenAIBackend

__all__ = [
    "Backend",
    "BackendResponse",
    "OpenAIBackend",
    "ToolCall",
    "parse_embedded_tool_calls",
]
