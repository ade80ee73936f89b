"""
Broadcast package — run the SOS forge script and resolve its transaction hash.

ProcessRunner -> HashExtractor -> BroadcastLogReader, orchestrated by
ResolutionPipeline behind a single-flight gate.
"""

from backend_sos.broadcast.broadcast_log import BroadcastLogReader, BroadcastLookup
from backend_sos.broadcast.extractor import DEFAULT_PATTERNS, HashExtractor, HashPattern
from backend_sos.broadcast.gate import SingleFlightGate, get_gate
from backend_sos.broadcast.models import (
    BroadcastRecord,
    ExecutionResult,
    OutcomeSource,
    ResolutionOutcome,
    TransactionEntry,
    TransactionIdentifier,
)
from backend_sos.broadcast.pipeline import PipelineState, ResolutionPipeline
from backend_sos.broadcast.runner import ProcessRunner

__all__ = [
    "BroadcastLogReader",
    "BroadcastLookup",
    "BroadcastRecord",
    "DEFAULT_PATTERNS",
    "ExecutionResult",
    "HashExtractor",
    "HashPattern",
    "OutcomeSource",
    "PipelineState",
    "ProcessRunner",
    "ResolutionOutcome",
    "ResolutionPipeline",
    "SingleFlightGate",
    "TransactionEntry",
    "TransactionIdentifier",
    "get_gate",
]
