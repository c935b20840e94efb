"""Tool adapter contract consumed by the agent manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


def empty_parameters() -> dict[str, Any]:
    return {"type": "object", "properties": {}}


@dataclass(frozen=True)
class ToolSchema:
    """Catalog entry describing one invocable tool."""

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=empty_parameters)

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "parameters": self.parameters}


@runtime_checkable
class ToolAdapter(Protocol):
    """Forwards tool invocations to an external tool facility.

    ``execute`` returns the tool output as text. Domain-level failures are
    returned as text as well; only failures that prevent the tool from running
    raise ``ToolError``.
    """

    def list_tool_schemas(self) -> list[ToolSchema]: ...

    async def execute(self, name: str, arguments: dict[str, Any]) -> str: ...
