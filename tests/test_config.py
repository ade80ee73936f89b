"""
Tests for env-driven settings.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from backend_sos.config import get_settings
from backend_sos.config.env import DEFAULT_CHAIN_ID, DEFAULT_SCRIPT_NAME

ENV_KEYS = (
    "SOS_SCRIPT_COMMAND",
    "SOS_SCRIPT_CWD",
    "SOS_SCRIPT_NAME",
    "SOS_CHAIN_ID",
    "SOS_BROADCAST_ROOT",
    "SOS_SCRIPT_TIMEOUT_SEC",
    "SOS_CONCURRENCY_MODE",
)


@pytest.fixture
def clean_env(monkeypatch):
    # Set to empty rather than delete so a local .env cannot fill them back in
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
    return monkeypatch


def test_defaults(clean_env):
    s = get_settings()
    assert s.script_command == ("forge", "script", "script/FinalTest.s.sol", "--broadcast")
    assert s.script_cwd == Path("..")
    assert s.script_name == DEFAULT_SCRIPT_NAME
    assert s.chain_id == DEFAULT_CHAIN_ID == 48900
    assert s.broadcast_root == Path("..") / "broadcast"
    assert s.script_timeout_sec == 300
    assert s.concurrency_mode == "reject"


def test_overrides(clean_env, tmp_path):
    clean_env.setenv("SOS_SCRIPT_COMMAND", "forge script script/Other.s.sol --broadcast --slow")
    clean_env.setenv("SOS_SCRIPT_CWD", str(tmp_path))
    clean_env.setenv("SOS_SCRIPT_NAME", "Other.s.sol")
    clean_env.setenv("SOS_CHAIN_ID", "48899")
    clean_env.setenv("SOS_CONCURRENCY_MODE", "queue")
    s = get_settings()
    assert s.script_command[-1] == "--slow"
    assert s.broadcast_root == tmp_path / "broadcast"
    assert s.chain_id == 48899
    assert s.concurrency_mode == "queue"


def test_timeout_disabled(clean_env):
    clean_env.setenv("SOS_SCRIPT_TIMEOUT_SEC", "0")
    assert get_settings().script_timeout_sec is None


@pytest.mark.parametrize(
    "key,value",
    [("SOS_CHAIN_ID", "zircuit"), ("SOS_SCRIPT_TIMEOUT_SEC", "soon"), ("SOS_CONCURRENCY_MODE", "parallel")],
)
def test_invalid_values(clean_env, key, value):
    clean_env.setenv(key, value)
    with pytest.raises(ValueError):
        get_settings()
