"""Agent manager: conversation loop and tool-call lifecycle."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum

from loguru import logger

from gamecode.backends.base import Backend, BackendResponse, ToolCall, parse_embedded_tool_calls
from gamecode.backends.openai_compat import OpenAIBackend
from gamecode.config import AgentConfig
from gamecode.context import ContextStore
from gamecode.errors import (
    BackendError,
    CompressionError,
    ConfigurationError,
    NotInitializedError,
    ToolExecutionError,
)
from gamecode.logging_utils import bind_session
from gamecode.tools.base import ToolAdapter


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one executed tool call."""

    tool_name: str
    result: str
    tool_call_id: str | None = None


@dataclass(frozen=True)
class AgentResponse:
    """Output of one process_input() call."""

    content: str
    tool_results: list[ToolResult] = field(default_factory=list)


class ManagerState(StrEnum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class AgentManager:
    """Drives one conversation between the user, the backend and the tools.

    The manager owns its context store and config; the backend and tool
    adapter are borrowed and may be shared across sessions. ``process_input``
    must not run concurrently on the same manager.

    A failed turn keeps the user message in the context, so a retried call
    sees the earlier attempt as well.
    """

    def __init__(
        self,
        backend: Backend,
        tools: ToolAdapter,
        config: AgentConfig | None = None,
        *,
        session_id: str | None = None,
    ) -> None:
        self._backend = backend
        self._tools = tools
        self._config = config or AgentConfig()
        self._session_id = session_id or str(uuid.uuid4())
        self._context = ContextStore()
        self._state = ManagerState.UNINITIALIZED

    @classmethod
    def from_config(cls, config: AgentConfig, tools: ToolAdapter, *, session_id: str | None = None) -> AgentManager:
        """Build a manager with the OpenAI-compatible backend.

        Raises:
            ConfigurationError: If the backend client cannot be created.
        """
        try:
            backend = OpenAIBackend.from_config(config)
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Failed to create backend: {exc!s}") from exc
        return cls(backend, tools, config, session_id=session_id)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def context(self) -> ContextStore:
        return self._context

    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is ManagerState.READY

    async def initialize(self) -> None:
        if self._state is ManagerState.READY:
            return
        logger.info("agent.init backend={} session={}", self._backend.name, self._session_id)
        self._state = ManagerState.READY

    def reset(self) -> None:
        """Drop the conversation history, keeping the session identity."""
        self._context.clear()
        logger.info("agent.reset session={}", self._session_id)

    async def process_input(self, text: str) -> AgentResponse:
        """Run one user turn through the backend and the requested tools.

        Raises:
            NotInitializedError: If initialize() has not been awaited.
            BackendError: If the backend call fails.
            ToolExecutionError: If a tool fails hard; remaining calls are skipped.
            CompressionError: If post-turn summarization fails. The completed
                response is attached as ``response``.
        """
        if not self.is_initialized:
            raise NotInitializedError()

        with bind_session(self._session_id):
            logger.info("agent.input chars={}", len(text))
            self._context.add_user_message(text)

            context = self._context.get_context()
            logger.debug("agent.context chars={}", len(context))
            backend_response = await self._generate(context)
            logger.info("agent.response chars={}", len(backend_response.content))

            tool_calls = self._resolve_tool_calls(backend_response)
            tool_results = await self._execute_tool_calls(tool_calls) if tool_calls else []

            self._context.add_assistant_message(backend_response.content)
            if tool_results:
                logger.debug("agent.tool_results.append count={}", len(tool_results))
                self._context.add_tool_results(tool_results)

            response = AgentResponse(content=backend_response.content, tool_results=tool_results)
            if self._config.auto_compress_context:
                try:
                    await self._maybe_compress_context()
                except CompressionError as exc:
                    exc.response = response
                    raise
            return response

    async def compress_context(self) -> bool:
        """Summarize the context regardless of its size.

        Returns False when there is nothing to summarize.
        """
        if not self.is_initialized:
            raise NotInitializedError()
        if not len(self._context):
            return False
        with bind_session(self._session_id):
            await self._compress()
        return True

    async def _generate(self, context: str) -> BackendResponse:
        tool_schemas = self._tools.list_tool_schemas()
        try:
            return await self._backend.generate(context, tool_schemas, self._session_id)
        except Exception as exc:
            logger.error("agent.backend.error error={}", exc)
            raise BackendError(f"Backend error: {exc!s}") from exc

    def _resolve_tool_calls(self, response: BackendResponse) -> list[ToolCall]:
        if response.tool_calls is not None:
            tool_calls = list(response.tool_calls)
        elif self._config.parse_embedded_tool_calls:
            tool_calls = parse_embedded_tool_calls(response.content)
        else:
            tool_calls = []

        for call in tool_calls:
            if call.id is None:
                logger.warning("agent.tool_call.missing_id name={}", call.name)
            else:
                logger.trace("agent.tool_call name={} id={!r}", call.name, call.id)
        logger.info("agent.tool_calls count={}", len(tool_calls))
        return tool_calls

    async def _execute_tool_calls(self, tool_calls: list[ToolCall]) -> list[ToolResult]:
        results: list[ToolResult] = []
        for call in tool_calls:
            try:
                output = await self._tools.execute(call.name, dict(call.arguments))
            except Exception as exc:
                logger.error("agent.tool.error name={} id={!r} error={}", call.name, call.id, exc)
                raise ToolExecutionError(
                    f"Tool execution error: {exc!s}",
                    tool_name=call.name,
                    tool_call_id=call.id,
                ) from exc
            results.append(ToolResult(tool_name=call.name, result=output, tool_call_id=call.id))
        return results

    async def _maybe_compress_context(self) -> None:
        length = self._context.context_length()
        if length <= self._config.max_context_length:
            return
        logger.info("agent.compress length={} limit={}", length, self._config.max_context_length)
        await self._compress()

    async def _compress(self) -> None:
        prompt = f"{self._config.summary_prompt}\n{self._context.get_context()}\n"
        try:
            summary = await self._backend.generate(prompt, [], self._session_id)
        except Exception as exc:
            logger.error("agent.compress.error error={}", exc)
            raise CompressionError(f"Context compression error: {exc!s}") from exc
        if not summary.content.strip():
            raise CompressionError("Context compression error: backend returned an empty summary")
        self._context.replace_with_summary(summary.content)
