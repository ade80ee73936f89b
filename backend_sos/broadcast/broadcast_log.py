"""
BroadcastLogReader — fallback source for the transaction hash.

forge writes broadcast/<script>/<chain_id>/run-latest.json after --broadcast.
The last entry of 'transactions' is the most recent one. Every failure here
(missing file, bad JSON, unexpected shape) is soft: the lookup comes back
empty with a diagnostic that is logged, never raised.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from backend_sos.broadcast.models import BroadcastRecord, TransactionIdentifier
from backend_sos.core.exceptions import ErrorKind
from backend_sos.sos_logging import get_logger

logger = get_logger(__name__)

RUN_LATEST_FILENAME = "run-latest.json"


@dataclass(frozen=True)
class BroadcastLookup:
    path: Path
    identifier: TransactionIdentifier | None = None
    diagnostic: str | None = None

    @property
    def found(self) -> bool:
        return self.identifier is not None


def broadcast_log_path(log_root: str | Path, script_name: str, chain_id: int) -> Path:
    """Path of forge's latest broadcast log for a script on a chain."""
    return Path(log_root) / script_name / str(chain_id) / RUN_LATEST_FILENAME


class BroadcastLogReader:
    def __init__(self, log_root: str | Path, script_name: str, chain_id: int) -> None:
        self.path = broadcast_log_path(log_root, script_name, chain_id)

    def _unavailable(self, diagnostic: str) -> BroadcastLookup:
        logger.warning(
            "broadcast_log_unavailable",
            kind=ErrorKind.BROADCAST_LOG_UNAVAILABLE.value,
            path=str(self.path),
            reason=diagnostic,
        )
        return BroadcastLookup(path=self.path, diagnostic=diagnostic)

    def read_record(self) -> BroadcastRecord:
        """Read and parse the log. Raises OSError / ValueError (incl. JSONDecodeError); read_latest() wraps this."""
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        return BroadcastRecord.from_json(data)

    def read_latest(self) -> BroadcastLookup:
        """Return the hash of the most recent transaction in the log, or an empty lookup."""
        if not self.path.is_file():
            return self._unavailable("broadcast log not found")
        try:
            record = self.read_record()
        except Exception as e:
            return self._unavailable(f"{type(e).__name__}: {e}")

        latest = record.latest
        if latest is None:
            return self._unavailable("broadcast log has no transactions")
        raw = latest.identifier
        if not TransactionIdentifier.is_valid(raw):
            return self._unavailable(f"last transaction has no valid hash: {str(raw)[:80]!r}")

        identifier = TransactionIdentifier(raw)
        logger.debug(
            "broadcast_log_read",
            path=str(self.path),
            tx_count=len(record.transactions),
            tx_hash=identifier.value,
        )
        return BroadcastLookup(path=self.path, identifier=identifier)
