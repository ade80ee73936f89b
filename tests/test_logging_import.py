"""
Test that sos_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from sos_logging and use the logger."""
    from backend_sos.sos_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    logger.info("test_message", key="value")


def test_bind_run_roundtrip():
    import structlog

    from backend_sos.sos_logging.logger import bind_run, clear_run

    bind_run("abc123")
    assert structlog.contextvars.get_contextvars()["run_id"] == "abc123"
    clear_run()
    assert "run_id" not in structlog.contextvars.get_contextvars()


def test_long_script_output_keeps_tail():
    from backend_sos.sos_logging.logger import OUTPUT_TAIL_CHARS, _tail_output

    stderr = "x" * OUTPUT_TAIL_CHARS + "revert: insufficient funds"
    event = _tail_output(None, "error", {"event": "script_failed", "stderr": stderr, "returncode": 1})
    assert len(event["stderr"]) == OUTPUT_TAIL_CHARS
    assert event["stderr"].endswith("revert: insufficient funds")
    assert event["stderr_truncated"] is True
    assert event["returncode"] == 1


def test_short_output_untouched():
    from backend_sos.sos_logging.logger import _tail_output

    event = _tail_output(None, "info", {"event": "script_run_finished", "stdout": "ok"})
    assert event == {"event": "script_run_finished", "stdout": "ok"}
