"""
Single-flight admission gate for the broadcast script.

Two overlapping runs could submit two transactions, so at most one run is
admitted at a time. 'reject' fails the second caller fast; 'queue' makes it
wait for the first to finish.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from backend_sos.core.exceptions import InvocationInProgress
from backend_sos.sos_logging import get_logger

logger = get_logger(__name__)


class SingleFlightGate:
    def __init__(self, name: str, mode: str = "reject") -> None:
        if mode not in ("reject", "queue"):
            raise ValueError(f"mode must be 'reject' or 'queue', got {mode!r}")
        self.name = name
        self.mode = mode
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def admit(self) -> Iterator[None]:
        """Hold the gate for the duration of the block. Raises InvocationInProgress in reject mode."""
        acquired = self._lock.acquire(blocking=self.mode == "queue")
        if not acquired:
            logger.warning("gate_rejected_busy", script=self.name)
            raise InvocationInProgress(self.name)
        try:
            yield
        finally:
            self._lock.release()


_gates: dict[str, SingleFlightGate] = {}
_gates_lock = threading.Lock()


def get_gate(name: str, mode: str = "reject") -> SingleFlightGate:
    """
    Process-wide gate keyed on script identity. The first caller fixes the mode;
    later callers with a different mode get the existing gate.
    """
    with _gates_lock:
        gate = _gates.get(name)
        if gate is None:
            gate = SingleFlightGate(name, mode)
            _gates[name] = gate
        return gate


def reset_gates_for_test() -> None:
    with _gates_lock:
        _gates.clear()
