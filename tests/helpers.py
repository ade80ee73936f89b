"""
Shared helpers for Backend SOS tests: stand-in script commands and broadcast logs.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

SCRIPT_NAME = "FinalTest.s.sol"
CHAIN_ID = 48900
HASH_A = "0x" + "a" * 64
HASH_1 = "0x" + "1" * 64
HASH_2 = "0x" + "2" * 64


def python_command(code: str, *args: str) -> list[str]:
    """Command line running `code` with the current interpreter."""
    return [sys.executable, "-c", code, *args]


def write_broadcast_log(root: Path, data, script_name: str = SCRIPT_NAME, chain_id: int = CHAIN_ID) -> Path:
    """Write run-latest.json where forge would; data is JSON-encoded unless it is already a str."""
    path = root / script_name / str(chain_id) / "run-latest.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    text = data if isinstance(data, str) else json.dumps(data)
    path.write_text(text, encoding="utf-8")
    return path
