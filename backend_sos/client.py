"""
Backend SOS API Python client.

Uses the requests library.

Usage:
    from backend_sos.client import SOSClient
    client = SOSClient("http://localhost:8000")
    result = client.trigger()
    if result.tx_hash is None:
        ...  # script ran, hash not recovered
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

# The script blocks until forge has broadcast; leave room for the server-side timeout.
DEFAULT_TIMEOUT_SEC = 330.0


class SOSClientError(Exception):
    """Raised when the API returns an error response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        kind: str | None = None,
        stderr: str | None = None,
        output: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind
        self.stderr = stderr
        self.output = output


@dataclass(frozen=True)
class TriggerResult:
    output: str
    tx_hash: str | None


class SOSClient:
    """Client for the SOS broadcast relay."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = DEFAULT_TIMEOUT_SEC):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _request(self, method: str, path: str) -> dict[str, Any]:
        resp = self._session.request(method, f"{self.base_url}{path}", timeout=self.timeout)
        is_json = resp.headers.get("content-type", "").startswith("application/json")
        body: dict[str, Any] = resp.json() if is_json else {}
        if not resp.ok:
            raise SOSClientError(
                f"API error: {body.get('error') or resp.text}",
                status_code=resp.status_code,
                kind=body.get("kind"),
                stderr=body.get("stderr"),
                output=body.get("output"),
            )
        return body

    def trigger(self) -> TriggerResult:
        """POST /api/emergency. Raises SOSClientError on 409 (busy) and 500 (script failed)."""
        body = self._request("POST", "/api/emergency")
        return TriggerResult(output=body.get("output", ""), tx_hash=body.get("txHash"))

    def status(self) -> dict[str, Any]:
        """GET /api/emergency/status."""
        return self._request("GET", "/api/emergency/status")

    def health(self) -> dict[str, Any]:
        """GET /health."""
        return self._request("GET", "/health")
