"""LLM backend contract consumed by the agent manager."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from gamecode.tools.base import ToolSchema


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the backend.

    ``id`` is the opaque correlation identifier assigned by the backend and
    must be echoed unmodified in the matching tool result.
    """

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    id: str | None = None


@dataclass(frozen=True)
class BackendResponse:
    """One generated response.

    ``tool_calls`` is ``None`` when the backend does not report structured tool
    calls; callers may then look for calls embedded in ``content``.
    """

    content: str
    model: str = ""
    tokens_used: int | None = None
    tool_calls: list[ToolCall] | None = None


@runtime_checkable
class Backend(Protocol):
    """Forwards a flattened context and a tool catalog to a model."""

    @property
    def name(self) -> str: ...

    @property
    def context_window(self) -> int: ...

    async def generate(
        self,
        context: str,
        tool_schemas: Sequence[ToolSchema],
        session_id: str,
    ) -> BackendResponse: ...


def parse_embedded_tool_calls(content: str) -> list[ToolCall]:
    """Extract tool calls from a JSON object with a ``tool_calls`` array.

    Anything that is not such an object yields an empty list.
    """
    try:
        parsed = json.loads(content)
    except (json.JSONDecodeError, TypeError):
        return []
    if not isinstance(parsed, dict):
        return []
    entries = parsed.get("tool_calls")
    if not isinstance(entries, list):
        return []

    calls: list[ToolCall] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name:
            logger.debug("tool_calls.embedded.skip entry={}", entry)
            continue
        arguments = entry.get("arguments")
        call_id = entry.get("id")
        calls.append(
            ToolCall(
                name=name,
                arguments=dict(arguments) if isinstance(arguments, dict) else {},
                id=call_id if isinstance(call_id, str) else None,
            )
        )
    return calls
