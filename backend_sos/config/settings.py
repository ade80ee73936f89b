"""
Application settings.

Collects the env-derived values from config.env into one typed object used by
the pipeline and the API server.
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from backend_sos.config.env import (
    get_broadcast_root,
    get_chain_id,
    get_concurrency_mode,
    get_script_command,
    get_script_cwd,
    get_script_name,
    get_script_timeout_sec,
    load_sos_env,
)


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one server process."""

    script_command: tuple[str, ...]
    script_cwd: Path
    script_name: str
    chain_id: int
    broadcast_root: Path
    script_timeout_sec: float | None
    concurrency_mode: str = "reject"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "info"


def get_settings() -> Settings:
    """
    Return the current application settings, read from env (and .env).

    Raises ValueError when a numeric or enum setting is malformed.
    """
    load_sos_env()
    return Settings(
        script_command=tuple(shlex.split(get_script_command())),
        script_cwd=get_script_cwd(),
        script_name=get_script_name(),
        chain_id=get_chain_id(),
        broadcast_root=get_broadcast_root(),
        script_timeout_sec=get_script_timeout_sec(),
        concurrency_mode=get_concurrency_mode(),
        api_host=os.getenv("API_HOST", "0.0.0.0").strip(),
        api_port=int(os.getenv("API_PORT", "8000").strip() or "8000"),
        log_level=os.getenv("LOG_LEVEL", "info").strip().lower() or "info",
    )
