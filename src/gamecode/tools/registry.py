"""Unified tool registry."""

from __future__ import annotations

import builtins
import inspect
import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from gamecode.errors import ToolError, ToolReportedError
from gamecode.tools.base import ToolSchema, empty_parameters

ToolHandler = Callable[..., Any]


def _shorten_text(text: str, width: int = 30, placeholder: str = "...") -> str:
    """Shorten text to width characters, cutting in the middle of words if needed."""
    if len(text) <= width:
        return text

    available = width - len(placeholder)
    if available <= 0:
        return placeholder

    return text[:available] + placeholder


def _render_output(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError:
        return str(value)


@dataclass(frozen=True)
class ToolDescriptor:
    """Tool metadata and runtime handle."""

    name: str
    description: str
    handler: ToolHandler
    params: type[BaseModel] | None = None

    def schema(self) -> ToolSchema:
        if self.params is None:
            return ToolSchema(self.name, self.description, empty_parameters())
        return ToolSchema(self.name, self.description, self.params.model_json_schema())


class ToolRegistry:
    """Tool adapter backed by in-process handlers."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(
        self,
        *,
        name: str,
        description: str,
        params: type[BaseModel] | None = None,
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Register a sync or async handler.

        With ``params`` the handler receives the validated model as ``params``;
        without it the JSON arguments are passed as keyword arguments.
        """

        def decorator(handler: ToolHandler) -> ToolHandler:
            if name in self._tools:
                raise ValueError(f"Duplicate tool name: {name}")
            self._tools[name] = ToolDescriptor(name=name, description=description, handler=handler, params=params)
            return handler

        return decorator

    def has(self, name: str) -> bool:
        return name in self._tools

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def descriptors(self) -> builtins.list[ToolDescriptor]:
        return sorted(self._tools.values(), key=lambda item: item.name)

    def list_tool_schemas(self) -> builtins.list[ToolSchema]:
        return [descriptor.schema() for descriptor in self.descriptors()]

    def _log_tool_call(self, name: str, arguments: dict[str, Any]) -> None:
        params: list[str] = []
        for key, value in arguments.items():
            try:
                rendered = json.dumps(value, ensure_ascii=False)
            except TypeError:
                rendered = repr(value)
            params.append(f"{key}={_shorten_text(rendered, width=30, placeholder='...')}")
        logger.info("tool.call.start name={} {{ {} }}", name, ", ".join(params))

    async def execute(self, name: str, arguments: dict[str, Any]) -> str:
        descriptor = self.get(name)
        if descriptor is None:
            raise ToolError(f"Unknown tool: {name}")

        self._log_tool_call(name, arguments)
        kwargs = arguments
        if descriptor.params is not None:
            try:
                kwargs = {"params": descriptor.params.model_validate(arguments)}
            except ValidationError as exc:
                logger.warning("tool.call.invalid name={} errors={}", name, exc.error_count())
                return f"error: invalid arguments for {name}: {exc}"
        else:
            try:
                inspect.signature(descriptor.handler).bind(**kwargs)
            except TypeError as exc:
                logger.warning("tool.call.invalid name={} error={}", name, exc)
                return f"error: invalid arguments for {name}: {exc}"

        start = time.monotonic()
        try:
            result = descriptor.handler(**kwargs)
            if inspect.isawaitable(result):
                result = await result
        except ToolReportedError as exc:
            logger.warning("tool.call.failed name={} error={}", name, exc)
            return f"error: {exc!s}"
        except Exception as exc:
            logger.exception("tool.call.error name={}", name)
            raise ToolError(f"{name}: {exc!s}") from exc
        finally:
            duration = time.monotonic() - start
            logger.info("tool.call.end name={} duration={:.3f}ms", name, duration * 1000)
        return _render_output(result)
