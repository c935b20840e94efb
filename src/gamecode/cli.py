"""Command line entry point for gamecode."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console

from gamecode.config import AgentConfig, get_config
from gamecode.errors import AgentError, CompressionError, ConfigurationError
from gamecode.logging_utils import configure_logging, resolve_profile
from gamecode.manager import AgentManager, AgentResponse
from gamecode.tools import ToolRegistry

EXIT_COMMANDS = frozenset({"quit", "exit", "q"})

app = typer.Typer(name="gamecode", help="Agent conversation loop for gamecode.", add_completion=False)


def build_manager(config: AgentConfig) -> AgentManager:
    return AgentManager.from_config(config, ToolRegistry())


class InteractiveCli:
    """Minimal REPL around one agent manager."""

    def __init__(self, manager: AgentManager, console: Console | None = None) -> None:
        self._manager = manager
        self._console = console or Console()

    async def run(self) -> None:
        await self._manager.initialize()
        self._console.print(f"[bold blue]gamecode[/bold blue] session [dim]{self._manager.session_id}[/dim]")
        while True:
            try:
                raw = await asyncio.to_thread(self._console.input, "[bold cyan]You:[/bold cyan] ")
            except (EOFError, KeyboardInterrupt):
                break
            text = raw.strip()
            if not text:
                continue
            if text.casefold() in EXIT_COMMANDS:
                break
            if text.casefold() == "reset":
                self._manager.reset()
                self._console.print("[dim]Conversation reset.[/dim]")
                continue
            await self.handle(text)

    async def handle(self, text: str) -> None:
        try:
            response = await self._manager.process_input(text)
        except CompressionError as exc:
            if exc.response is not None:
                self._render(exc.response)
            self._error(exc)
        except AgentError as exc:
            self._error(exc)
        else:
            self._render(response)

    def _render(self, response: AgentResponse) -> None:
        for result in response.tool_results:
            self._console.print(f"[dim]tool {result.tool_name} ({result.tool_call_id or '-'}):[/dim] {result.result}")
        self._console.print(f"[bold green]Assistant:[/bold green] {response.content}")

    def _error(self, exc: AgentError) -> None:
        self._console.print(f"[bold red]Error ({exc.kind}):[/bold red] {exc}")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    trace: Annotated[bool, typer.Option("--trace", help="Enable trace logging")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
) -> None:
    if ctx.invoked_subcommand is None:
        ctx.invoke(chat, trace=trace, debug=debug)


@app.command()
def chat(
    trace: Annotated[bool, typer.Option("--trace", help="Enable trace logging")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
    model: Annotated[str | None, typer.Option("--model", help="Model name override")] = None,
    max_context_length: Annotated[
        int | None, typer.Option("--max-context-length", help="Compression threshold override")
    ] = None,
) -> None:
    """Start an interactive conversation."""
    configure_logging(profile=resolve_profile(trace=trace, debug=debug, interactive=True))
    try:
        config = get_config(model=model, max_context_length=max_context_length)
        manager = build_manager(config)
    except ConfigurationError as exc:
        logger.error("cli.startup.error error={}", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc
    asyncio.run(InteractiveCli(manager).run())
