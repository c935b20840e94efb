from loguru import logger

from gamecode import logging_utils
from gamecode.logging_utils import bind_session, configure_logging, current_session, resolve_profile


def test_resolve_profile_prefers_trace_over_debug() -> None:
    assert resolve_profile(trace=True, debug=True) == "trace"
    assert resolve_profile(trace=False, debug=True) == "debug"
    assert resolve_profile(trace=False, debug=False) == "default"
    assert resolve_profile(trace=False, debug=False, interactive=True) == "chat"


def test_bind_session_is_scoped() -> None:
    assert current_session() == "-"
    with bind_session("abc"):
        assert current_session() == "abc"
    assert current_session() == "-"


def test_configure_logging_injects_session(monkeypatch) -> None:
    monkeypatch.setattr(logging_utils, "_CONFIGURED_PROFILE", None)
    records: list[dict] = []

    configure_logging(profile="debug")
    sink_id = logger.add(lambda message: records.append(message.record["extra"].copy()), level="DEBUG")
    try:
        with bind_session("session-42"):
            logger.debug("inside")
        logger.debug("outside")
    finally:
        logger.remove(sink_id)
        logger.configure(patcher=None)

    assert [record["session"] for record in records] == ["session-42", "-"]
