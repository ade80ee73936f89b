"""
HashExtractor — find the transaction hash in the script's console output.

Patterns are tried in list order and the first one that yields a valid hash
wins, even if a later pattern matches earlier in the text. A label whose value
is not exactly 0x + 64 hex digits is skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from backend_sos.broadcast.models import TransactionIdentifier
from backend_sos.sos_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HashPattern:
    """A labelled recognition pattern. Group 'value' captures the candidate hash."""

    label: str
    regex: re.Pattern[str]

    @classmethod
    def for_label(cls, label: str) -> "HashPattern":
        """
        label (optionally closing-quoted, as in JSON keys), then any run of ':' / whitespace,
        then an optionally quoted 0x value.
        The value group is deliberately loose so malformed hashes are seen and rejected.
        """
        regex = re.compile(
            re.escape(label) + r"""["']?[:\s]+["']?(?P<value>0x[0-9a-z]*)["']?""",
            re.IGNORECASE,
        )
        return cls(label=label, regex=regex)

    def candidates(self, text: str) -> Iterable[str]:
        for m in self.regex.finditer(text):
            yield m.group("value")


# Priority order, not specificity order.
DEFAULT_LABELS = ("transactionHash", "Transaction", "hash")
DEFAULT_PATTERNS: tuple[HashPattern, ...] = tuple(HashPattern.for_label(label) for label in DEFAULT_LABELS)


@dataclass(frozen=True)
class ExtractionMatch:
    identifier: TransactionIdentifier
    label: str


class HashExtractor:
    def __init__(self, patterns: Sequence[HashPattern] = DEFAULT_PATTERNS) -> None:
        if not patterns:
            raise ValueError("at least one pattern is required")
        self.patterns = tuple(patterns)

    def extract_with_label(self, text: str | None) -> ExtractionMatch | None:
        """Return the first valid hash and the label that found it, or None."""
        if not text:
            return None
        for pattern in self.patterns:
            for value in pattern.candidates(text):
                if TransactionIdentifier.is_valid(value):
                    return ExtractionMatch(identifier=TransactionIdentifier(value), label=pattern.label)
                logger.debug("tx_hash_candidate_rejected", label=pattern.label, value=value[:80])
        return None

    def extract(self, text: str | None) -> TransactionIdentifier | None:
        """Return the first valid hash by pattern priority, or None when nothing matches."""
        match = self.extract_with_label(text)
        return match.identifier if match is not None else None
