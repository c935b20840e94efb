from typing import Any

import pytest
from pydantic import BaseModel, Field

from gamecode.backends import BackendResponse, ToolCall
from gamecode.errors import ToolError, ToolReportedError
from gamecode.manager import AgentManager
from gamecode.tools import ToolAdapter, ToolRegistry, ToolSchema


class ScriptedBackend:
    name = "scripted"
    context_window = 1000

    def __init__(self, outputs: list[BackendResponse]) -> None:
        self._outputs = outputs

    async def generate(self, context: str, tool_schemas: Any, session_id: str) -> BackendResponse:
        return self._outputs.pop(0)


class ReadFileParams(BaseModel):
    path: str = Field(..., description="File path relative to the workspace")


def _registry() -> ToolRegistry:
    registry = ToolRegistry()

    @registry.register(name="read_file", description="Read a file", params=ReadFileParams)
    def read_file(*, params: ReadFileParams) -> str:
        if params.path == "missing.txt":
            raise ToolReportedError(f"no such file: {params.path}")
        return f"contents of {params.path}"

    @registry.register(name="add", description="Add numbers")
    async def add(*, a: int, b: int) -> dict[str, int]:
        return {"sum": a + b}

    @registry.register(name="explode", description="Always fails")
    def explode() -> str:
        raise RuntimeError("boom")

    return registry


def test_registry_satisfies_tool_adapter_protocol() -> None:
    assert isinstance(ToolRegistry(), ToolAdapter)


def test_schemas_are_sorted_and_derived_from_params() -> None:
    schemas = _registry().list_tool_schemas()

    assert [schema.name for schema in schemas] == ["add", "explode", "read_file"]
    read_schema = schemas[2]
    assert read_schema.description == "Read a file"
    assert read_schema.parameters["properties"]["path"]["type"] == "string"
    assert read_schema.parameters["required"] == ["path"]
    assert schemas[0] == ToolSchema("add", "Add numbers", {"type": "object", "properties": {}})


@pytest.mark.asyncio
async def test_execute_validated_params() -> None:
    assert await _registry().execute("read_file", {"path": "a.txt"}) == "contents of a.txt"


@pytest.mark.asyncio
async def test_execute_async_handler_encodes_json() -> None:
    assert await _registry().execute("add", {"a": 1, "b": 2}) == '{"sum": 3}'


@pytest.mark.asyncio
async def test_domain_failure_is_returned_as_text() -> None:
    output = await _registry().execute("read_file", {"path": "missing.txt"})

    assert output == "error: no such file: missing.txt"


@pytest.mark.asyncio
async def test_invalid_arguments_are_returned_as_text() -> None:
    output = await _registry().execute("read_file", {})

    assert output.startswith("error: invalid arguments for read_file:")


@pytest.mark.asyncio
async def test_unexpected_keyword_is_returned_as_text() -> None:
    output = await _registry().execute("add", {"a": 1, "b": 2, "c": 3})

    assert output.startswith("error: invalid arguments for add:")
    assert "'c'" in output


@pytest.mark.asyncio
async def test_missing_keyword_is_returned_as_text() -> None:
    output = await _registry().execute("add", {"a": 1})

    assert output.startswith("error: invalid arguments for add:")


@pytest.mark.asyncio
async def test_stray_argument_does_not_abort_the_turn() -> None:
    registry = ToolRegistry()

    @registry.register(name="echo", description="Echo text")
    def echo(text: str) -> str:
        return text

    call = ToolCall(name="echo", arguments={"text": "hi", "extra": 1}, id="tc")
    backend = ScriptedBackend([BackendResponse(content="echoing", tool_calls=[call])])
    manager = AgentManager(backend, registry, session_id="session-1")
    await manager.initialize()

    response = await manager.process_input("say hi")

    assert len(response.tool_results) == 1
    assert response.tool_results[0].tool_call_id == "tc"
    assert response.tool_results[0].result.startswith("error: invalid arguments for echo:")


@pytest.mark.asyncio
async def test_handler_exception_is_hard_error() -> None:
    with pytest.raises(ToolError, match="explode: boom") as exc_info:
        await _registry().execute("explode", {})

    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_unknown_tool_is_hard_error() -> None:
    with pytest.raises(ToolError, match="Unknown tool: nope"):
        await _registry().execute("nope", {})


def test_duplicate_registration_raises() -> None:
    registry = ToolRegistry()
    registry.register(name="dup", description="first")(lambda: "a")

    with pytest.raises(ValueError, match="Duplicate tool name"):
        registry.register(name="dup", description="second")(lambda: "b")


@pytest.mark.asyncio
async def test_registry_logs_start_and_end_once(monkeypatch) -> None:
    logs: list[str] = []

    def _capture(message: str, *args: object) -> None:
        logs.append(message)

    monkeypatch.setattr("gamecode.tools.registry.logger.info", _capture)

    await _registry().execute("add", {"a": 1, "b": 2})

    assert logs.count("tool.call.start name={} {{ {} }}") == 1
    assert logs.count("tool.call.end name={} duration={:.3f}ms") == 1
