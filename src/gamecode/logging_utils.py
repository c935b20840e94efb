"""Runtime logging helpers."""

from __future__ import annotations

import contextlib
import os
import sys
from collections.abc import Generator
from contextvars import ContextVar
from logging import Handler
from typing import Literal

import loguru
from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "debug", "trace", "chat"]

_PROFILE_LEVELS: dict[LogProfile, str] = {
    "default": "WARNING",
    "debug": "DEBUG",
    "trace": "TRACE",
    "chat": "WARNING",
}
_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {extra[session]} | {message}"
_CONFIGURED_PROFILE: LogProfile | None = None
_session_context: ContextVar[str] = ContextVar("session", default="-")


def current_session() -> str:
    """Get the session id bound to the current task, or '-'."""
    return _session_context.get()


@contextlib.contextmanager
def bind_session(session_id: str) -> Generator[None, None, None]:
    """Tag log records emitted inside the block with a session id."""
    token = _session_context.set(session_id)
    try:
        yield
    finally:
        _session_context.reset(token)


def _build_chat_handler() -> Handler:
    return RichHandler(
        console=get_console(),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def _inject_context(record: loguru.Record) -> None:
    record["extra"]["session"] = current_session()


def configure_logging(*, profile: LogProfile = "default") -> None:
    """Configure process-level logging once per profile."""
    global _CONFIGURED_PROFILE
    if profile == _CONFIGURED_PROFILE:
        return

    level = os.getenv("GAMECODE_LOG_LEVEL", _PROFILE_LEVELS[profile]).upper()
    logger.remove()
    logger.configure(patcher=_inject_context)
    if profile == "chat":
        logger.add(
            _build_chat_handler(),
            level=level,
            format="{message}",
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            level=level,
            format=_FORMAT,
            backtrace=profile == "trace",
            diagnose=False,
        )
    _CONFIGURED_PROFILE = profile


def resolve_profile(*, trace: bool, debug: bool, interactive: bool = False) -> LogProfile:
    """Pick a log profile from the --trace/--debug flag pair."""
    if trace:
        return "trace"
    if debug:
        return "debug"
    return "chat" if interactive else "default"
