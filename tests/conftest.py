"""
Pytest fixtures for Backend SOS tests.

Scripts are stand-ins run with sys.executable so no forge install is needed.
Broadcast logs are written under tmp_path.
"""

from __future__ import annotations

import shlex
from pathlib import Path

import pytest

from backend_sos.broadcast.gate import reset_gates_for_test

from tests.helpers import CHAIN_ID, SCRIPT_NAME, python_command


@pytest.fixture(autouse=True)
def fresh_gates():
    """Each test gets its own single-flight gates."""
    reset_gates_for_test()
    yield
    reset_gates_for_test()


@pytest.fixture
def broadcast_root(tmp_path) -> Path:
    root = tmp_path / "broadcast"
    root.mkdir()
    return root


@pytest.fixture
def sos_env(monkeypatch, tmp_path, broadcast_root):
    """
    Point the settings at tmp_path and return a setter for the script code.

        sos_env("print('hash: 0x...')")
    """
    monkeypatch.setenv("SOS_SCRIPT_CWD", str(tmp_path))
    monkeypatch.setenv("SOS_BROADCAST_ROOT", str(broadcast_root))
    monkeypatch.setenv("SOS_SCRIPT_NAME", SCRIPT_NAME)
    monkeypatch.setenv("SOS_CHAIN_ID", str(CHAIN_ID))
    monkeypatch.setenv("SOS_SCRIPT_TIMEOUT_SEC", "30")
    monkeypatch.setenv("SOS_CONCURRENCY_MODE", "reject")

    def set_script(code: str, *args: str) -> None:
        monkeypatch.setenv("SOS_SCRIPT_COMMAND", shlex.join(python_command(code, *args)))

    return set_script


@pytest.fixture
def client(sos_env):
    """FastAPI TestClient. Depends on sos_env so settings point at tmp_path."""
    from fastapi.testclient import TestClient

    from backend_sos.api_server.server import app

    return TestClient(app)
