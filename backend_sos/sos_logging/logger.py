"""
Structured logging for the SOS broadcast service.

Every line is one event: event_type first, then keyword context such as
run_id, script, returncode, tx_hash or kind. A pipeline run binds its run_id
through contextvars, so the start, finish and resolution lines of one broadcast
can be grouped without threading the id through each call.

Script output can be long (forge prints full traces on failure), so captured
stdout/stderr fields are cut to their tail before rendering.

Depends only on stdlib logging and structlog; importing backend_sos here would
be circular.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# json in production, console renderer when LOG_FORMAT=console
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

OUTPUT_FIELDS = ("stdout", "stderr", "output")
OUTPUT_TAIL_CHARS = int(os.getenv("LOG_OUTPUT_TAIL_CHARS", "2000"))


def _add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _normalize_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type; message mirrors it unless given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def _tail_output(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Keep only the last OUTPUT_TAIL_CHARS of captured script output fields."""
    for key in OUTPUT_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > OUTPUT_TAIL_CHARS:
            event_dict[key] = value[-OUTPUT_TAIL_CHARS:]
            event_dict[f"{key}_truncated"] = True
    return event_dict


def build_processors(log_format: str = LOG_FORMAT) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
        _tail_output,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_structlog() -> None:
    structlog.configure(
        processors=build_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger bound to the module name.

        logger = get_logger(__name__)
        logger.info("script_run_finished", returncode=0, duration_sec=41.2)
        logger.info("tx_hash_found_in_output", tx_hash="0x5f...", label="Transaction Hash")

    Output (JSON): {"run_id": "9c1e...", "logger": "backend_sos.broadcast.pipeline",
    "event_type": "tx_hash_found_in_output", "tx_hash": "0x5f...", "label": "Transaction Hash",
    "level": "info", "timestamp": "..."}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_run(run_id: str) -> None:
    """Tag every log line of the current pipeline run with run_id."""
    structlog.contextvars.bind_contextvars(run_id=run_id)


def clear_run() -> None:
    structlog.contextvars.unbind_contextvars("run_id")
