"""
Tests for SOSClient with a mocked requests session.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from backend_sos.client import SOSClient, SOSClientError

from tests.helpers import HASH_A


def _response(status_code: int, body: dict) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.headers = {"content-type": "application/json"}
    resp.json.return_value = body
    resp.text = str(body)
    return resp


@pytest.fixture
def sos_client() -> SOSClient:
    client = SOSClient("http://sos.local/")
    client._session = MagicMock()
    return client


def test_trigger_success(sos_client):
    sos_client._session.request.return_value = _response(200, {"success": True, "output": "ok", "txHash": HASH_A})
    result = sos_client.trigger()
    assert result.tx_hash == HASH_A
    assert result.output == "ok"
    method, url = sos_client._session.request.call_args.args
    assert (method, url) == ("POST", "http://sos.local/api/emergency")


def test_trigger_no_hash(sos_client):
    sos_client._session.request.return_value = _response(200, {"success": True, "output": "", "txHash": None})
    assert sos_client.trigger().tx_hash is None


def test_trigger_script_failure(sos_client):
    body = {
        "success": False,
        "error": "Command failed",
        "kind": "execution_failure",
        "stderr": "insufficient funds",
        "output": "",
    }
    sos_client._session.request.return_value = _response(500, body)
    with pytest.raises(SOSClientError) as exc_info:
        sos_client.trigger()
    err = exc_info.value
    assert err.status_code == 500
    assert err.kind == "execution_failure"
    assert err.stderr == "insufficient funds"


def test_trigger_busy(sos_client):
    sos_client._session.request.return_value = _response(
        409, {"success": False, "error": "already running", "kind": "invocation_in_progress"}
    )
    with pytest.raises(SOSClientError) as exc_info:
        sos_client.trigger()
    assert exc_info.value.status_code == 409
    assert exc_info.value.kind == "invocation_in_progress"
