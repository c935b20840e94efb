"""OpenAI-compatible chat completion backend."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any, ClassVar

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from gamecode.backends.base import BackendResponse, ToolCall
from gamecode.config import AgentConfig
from gamecode.errors import ConfigurationError
from gamecode.tools.base import ToolSchema


class OpenAIBackend:
    """Backend client speaking the chat completions API.

    Transport retries are handled by the underlying client (``max_retries``).
    """

    DEFAULT_CONTEXT_WINDOW: ClassVar[int] = 128_000

    def __init__(
        self,
        *,
        model: str,
        client: AsyncOpenAI,
        max_tokens: int,
        system_prompt: str | None = None,
        context_window: int = DEFAULT_CONTEXT_WINDOW,
    ) -> None:
        self._model = model
        self._client = client
        self._max_tokens = max_tokens
        self._system_prompt = (system_prompt or "").strip()
        self._context_window = context_window

    @classmethod
    def from_config(cls, config: AgentConfig) -> OpenAIBackend:
        try:
            client = AsyncOpenAI(
                api_key=config.api_key,
                base_url=config.api_base,
                timeout=config.timeout_seconds,
                max_retries=config.max_retries,
            )
        except OpenAIError as exc:
            raise ConfigurationError(f"Failed to create backend client: {exc!s}") from exc
        return cls(
            model=config.model,
            client=client,
            max_tokens=config.max_tokens,
            system_prompt=config.system_prompt,
        )

    @property
    def name(self) -> str:
        return f"openai:{self._model}"

    @property
    def context_window(self) -> int:
        return self._context_window

    async def generate(
        self,
        context: str,
        tool_schemas: Sequence[ToolSchema],
        session_id: str,
    ) -> BackendResponse:
        logger.trace("backend.generate model={} context_chars={}", self._model, len(context))
        messages: list[dict[str, Any]] = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append({"role": "user", "content": context})

        request: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "max_tokens": self._max_tokens,
            "user": session_id,
        }
        if tool_schemas:
            request["tools"] = [_as_openai_tool(schema) for schema in tool_schemas]

        response = await self._client.chat.completions.create(**request)
        backend_response = BackendResponse(
            content=_extract_text(response),
            model=getattr(response, "model", None) or self._model,
            tokens_used=_extract_tokens(response),
            tool_calls=_extract_tool_calls(response),
        )
        logger.trace(
            "backend.generate.done chars={} tool_calls={}",
            len(backend_response.content),
            len(backend_response.tool_calls or []),
        )
        return backend_response


def _as_openai_tool(schema: ToolSchema) -> dict[str, Any]:
    return {
        "type": "function",
        "function": schema.as_dict(),
    }


def _first_message(response: Any) -> Any:
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    return getattr(choices[0], "message", None)


def _extract_text(response: Any) -> str:
    message = _first_message(response)
    if message is None:
        return ""
    return getattr(message, "content", "") or ""


def _extract_tokens(response: Any) -> int | None:
    usage = getattr(response, "usage", None)
    total = getattr(usage, "total_tokens", None)
    return total if isinstance(total, int) else None


def _extract_tool_calls(response: Any) -> list[ToolCall]:
    message = _first_message(response)
    if message is None:
        return []
    calls: list[ToolCall] = []
    for tool_call in getattr(message, "tool_calls", None) or []:
        function = getattr(tool_call, "function", None)
        if function is None:
            continue
        name = getattr(function, "name", "") or ""
        calls.append(
            ToolCall(
                name=name,
                arguments=_decode_arguments(name, getattr(function, "arguments", None)),
                id=getattr(tool_call, "id", None),
            )
        )
    return calls


def _decode_arguments(name: str, raw: object) -> dict[str, Any]:
    if isinstance(raw, dict):
        return dict(raw)
    if not isinstance(raw, str) or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("backend.tool_call.bad_arguments name={} raw={!r}", name, raw[:200])
        return {}
    if not isinstance(parsed, dict):
        logger.warning("backend.tool_call.bad_arguments name={} type={}", name, type(parsed).__name__)
        return {}
    return parsed
