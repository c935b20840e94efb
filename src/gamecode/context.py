"""Conversation context store."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from gamecode.manager import ToolResult

TURN_SEPARATOR = "\n\n"


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    SUMMARY = "summary"


@dataclass(frozen=True)
class Turn:
    """One recorded message in a conversation."""

    role: Role
    content: str
    tool_name: str | None = None
    tool_call_id: str | None = None

    def render(self) -> str:
        if self.role is Role.USER:
            return f"User: {self.content}"
        if self.role is Role.ASSISTANT:
            return f"Assistant: {self.content}"
        if self.role is Role.SUMMARY:
            return f"Summary of earlier conversation: {self.content}"
        label = f"Tool result [{self.tool_name or '-'}]"
        if self.tool_call_id is not None:
            label = f"{label} ({self.tool_call_id})"
        return f"{label}: {self.content}"


class ContextStore:
    """Insertion-ordered turn history with a flattened text rendering.

    Turns are only ever appended. ``replace_with_summary`` is the single
    operation that shrinks the history, and it always leaves exactly one
    summary turn behind.
    """

    def __init__(self, turns: Iterable[Turn] = ()) -> None:
        self._turns: list[Turn] = list(turns)

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def add_user_message(self, text: str) -> None:
        self._turns.append(Turn(Role.USER, text))

    def add_assistant_message(self, text: str) -> None:
        self._turns.append(Turn(Role.ASSISTANT, text))

    def add_tool_results(self, results: Iterable[ToolResult]) -> None:
        for result in results:
            self._turns.append(
                Turn(
                    Role.TOOL,
                    result.result,
                    tool_name=result.tool_name,
                    tool_call_id=result.tool_call_id,
                )
            )

    def get_context(self) -> str:
        return TURN_SEPARATOR.join(turn.render() for turn in self._turns)

    def context_length(self) -> int:
        return len(self.get_context())

    def replace_with_summary(self, summary_text: str) -> None:
        dropped = len(self._turns)
        self._turns = [Turn(Role.SUMMARY, summary_text)]
        logger.info("context.summary.replaced dropped_turns={} summary_chars={}", dropped, len(summary_text))

    def clear(self) -> None:
        self._turns.clear()
