"""
Environment variable loading for Backend SOS.

- SOS_SCRIPT_COMMAND: command line of the broadcast script
- SOS_SCRIPT_CWD: working directory the script runs from
- SOS_SCRIPT_NAME / SOS_CHAIN_ID: identify the broadcast log to fall back to
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_sos/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SCRIPT_NAME = "FinalTest.s.sol"
DEFAULT_SCRIPT_COMMAND = f"forge script script/{DEFAULT_SCRIPT_NAME} --broadcast"
# forge finds foundry.toml in the parent of the frontend/server directory
DEFAULT_SCRIPT_CWD = ".."
# Zircuit mainnet
DEFAULT_CHAIN_ID = 48900
DEFAULT_SCRIPT_TIMEOUT_SEC = 300.0

CONCURRENCY_MODES = ("reject", "queue")


def load_sos_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def _env(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def get_script_command() -> str:
    load_sos_env()
    return _env("SOS_SCRIPT_COMMAND", DEFAULT_SCRIPT_COMMAND)


def get_script_cwd() -> Path:
    load_sos_env()
    return Path(_env("SOS_SCRIPT_CWD", DEFAULT_SCRIPT_CWD))


def get_script_name() -> str:
    load_sos_env()
    return _env("SOS_SCRIPT_NAME", DEFAULT_SCRIPT_NAME)


def get_chain_id() -> int:
    """Return SOS_CHAIN_ID from env. Default: 48900 (Zircuit)."""
    load_sos_env()
    raw = _env("SOS_CHAIN_ID", str(DEFAULT_CHAIN_ID))
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"SOS_CHAIN_ID must be an integer, got {raw!r}") from e


def get_broadcast_root() -> Path:
    """
    Return the forge broadcast directory.
    Default: <script cwd>/broadcast, which is where forge writes run-latest.json.
    """
    load_sos_env()
    raw = (os.getenv("SOS_BROADCAST_ROOT") or "").strip()
    if raw:
        return Path(raw)
    return get_script_cwd() / "broadcast"


def get_script_timeout_sec() -> float | None:
    """
    Return SOS_SCRIPT_TIMEOUT_SEC. 0 or negative disables the timeout.
    """
    load_sos_env()
    raw = _env("SOS_SCRIPT_TIMEOUT_SEC", str(DEFAULT_SCRIPT_TIMEOUT_SEC))
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"SOS_SCRIPT_TIMEOUT_SEC must be a number, got {raw!r}") from e
    return value if value > 0 else None


def get_concurrency_mode() -> str:
    """Return SOS_CONCURRENCY_MODE: reject | queue. Default: reject."""
    load_sos_env()
    raw = _env("SOS_CONCURRENCY_MODE", "reject").lower()
    if raw not in CONCURRENCY_MODES:
        raise ValueError(f"SOS_CONCURRENCY_MODE must be one of {CONCURRENCY_MODES}, got {raw!r}")
    return raw
