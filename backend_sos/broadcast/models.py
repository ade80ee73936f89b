"""
Data models for the transaction-hash resolution pipeline.

- ExecutionResult: captured output of one script run.
- TransactionIdentifier: validated 0x-prefixed 32-byte hash.
- BroadcastRecord / TransactionEntry: forge run-latest.json, read-only.
- ResolutionOutcome: terminal value returned to the API layer.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Any

from backend_sos.core.exceptions import ErrorKind

TX_HASH_HEX_LEN = 64
TX_HASH_LEN = TX_HASH_HEX_LEN + 2
_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class ExecutionResult:
    """
    Output of one ProcessRunner invocation.

    launch_error is set when the process never ran (missing executable,
    permission error, missing cwd); exit_code is then -1.
    """

    stdout: str
    stderr: str
    exit_code: int
    launch_error: str | None = None
    timed_out: bool = False
    duration_sec: float = 0.0

    @property
    def launched(self) -> bool:
        return self.launch_error is None

    @property
    def ok(self) -> bool:
        """True when the script ran to completion with exit code 0."""
        return self.launched and not self.timed_out and self.exit_code == 0


@dataclass(frozen=True)
class TransactionIdentifier:
    """A transaction hash: '0x' + 64 hex digits (any case). Original casing is kept."""

    value: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.value):
            raise ValueError(f"Invalid transaction hash: {self.value!r}")

    @staticmethod
    def is_valid(text: Any) -> bool:
        if not isinstance(text, str) or len(text) != TX_HASH_LEN:
            return False
        if text[:2] != "0x":
            return False
        return all(c in _HEX_DIGITS for c in text[2:])

    @classmethod
    def parse(cls, text: str) -> "TransactionIdentifier":
        """Build from text; raises ValueError when the hash is malformed."""
        return cls(text)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TransactionEntry:
    """One element of run-latest.json 'transactions'. forge writes 'hash'; older tooling 'transactionHash'."""

    hash: Any = None
    transaction_hash: Any = None

    @classmethod
    def from_json(cls, item: Any) -> "TransactionEntry":
        if not isinstance(item, dict):
            return cls()
        return cls(hash=item.get("hash"), transaction_hash=item.get("transactionHash"))

    @property
    def identifier(self) -> Any:
        """Raw identifier: 'hash' when present, else 'transactionHash'."""
        return self.hash or self.transaction_hash


@dataclass(frozen=True)
class BroadcastRecord:
    """Parsed broadcast log. transactions keeps file order (last = most recent)."""

    transactions: tuple[TransactionEntry, ...] = ()

    @classmethod
    def from_json(cls, data: Any) -> "BroadcastRecord":
        """
        Build from the decoded JSON document.

        Raises ValueError when the document is not an object with a
        'transactions' list.
        """
        if not isinstance(data, dict):
            raise ValueError("broadcast log is not a JSON object")
        txs = data.get("transactions")
        if not isinstance(txs, list):
            raise ValueError("broadcast log has no 'transactions' list")
        return cls(transactions=tuple(TransactionEntry.from_json(t) for t in txs))

    @property
    def latest(self) -> TransactionEntry | None:
        return self.transactions[-1] if self.transactions else None


class OutcomeSource(str, Enum):
    FROM_OUTPUT = "from_output"
    FROM_BROADCAST_LOG = "from_broadcast_log"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Terminal result of one pipeline run.

    succeeded reports whether the script itself ran cleanly; identifier and
    source report whether a hash was recovered. succeeded=True with
    source=NOT_FOUND is a distinct, valid combination.
    """

    succeeded: bool
    source: OutcomeSource
    identifier: TransactionIdentifier | None = None
    raw_output: str = ""
    stderr: str = ""
    diagnostic: str | None = None
    error_kind: ErrorKind | None = None

    def __post_init__(self) -> None:
        has_id = self.identifier is not None
        if not self.succeeded and has_id:
            raise ValueError("failed outcome cannot carry a transaction hash")
        if self.source is OutcomeSource.NOT_FOUND and has_id:
            raise ValueError("NOT_FOUND outcome cannot carry a transaction hash")
        if self.source is not OutcomeSource.NOT_FOUND and not has_id:
            raise ValueError(f"{self.source.value} outcome requires a transaction hash")
        if not self.succeeded and self.error_kind is None:
            raise ValueError("failed outcome requires an error kind")

    @classmethod
    def failed(cls, result: ExecutionResult, kind: ErrorKind, diagnostic: str) -> "ResolutionOutcome":
        return cls(
            succeeded=False,
            source=OutcomeSource.NOT_FOUND,
            raw_output=result.stdout,
            stderr=result.stderr,
            diagnostic=diagnostic,
            error_kind=kind,
        )

    @property
    def tx_hash(self) -> str | None:
        return self.identifier.value if self.identifier is not None else None
