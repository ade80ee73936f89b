"""
Application-level error kinds and exceptions.

ErrorKind is a closed enumeration so the pipeline and the API branch on kind,
never on message text. Only the fatal kinds become HTTP errors.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    LAUNCH_FAILURE = "launch_failure"
    EXECUTION_FAILURE = "execution_failure"
    EXECUTION_TIMEOUT = "execution_timeout"
    EXTRACTION_AMBIGUOUS = "extraction_ambiguous"
    BROADCAST_LOG_UNAVAILABLE = "broadcast_log_unavailable"
    INVOCATION_IN_PROGRESS = "invocation_in_progress"

    @property
    def fatal(self) -> bool:
        """True when the kind fails the request (script did not run to a clean exit)."""
        return self in _FATAL_KINDS


_FATAL_KINDS = frozenset(
    {
        ErrorKind.LAUNCH_FAILURE,
        ErrorKind.EXECUTION_FAILURE,
        ErrorKind.EXECUTION_TIMEOUT,
    }
)


class SOSError(Exception):
    """Base class for Backend SOS errors. Carries an ErrorKind."""

    kind: ErrorKind = ErrorKind.EXECUTION_FAILURE

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def message(self) -> str:
        return str(self)


class InvocationInProgress(SOSError):
    """Raised by the single-flight gate when a broadcast is already running."""

    kind = ErrorKind.INVOCATION_IN_PROGRESS

    def __init__(self, script: str) -> None:
        super().__init__(f"Broadcast script {script} is already running")
        self.script = script


class ScriptExecutionError(SOSError):
    """
    The broadcast script never launched, timed out or exited non-zero.

    Carries the captured stderr/stdout to the HTTP layer. Both are None when the
    process never launched, since there is no output to report.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        stderr: str | None = None,
        output: str | None = None,
    ) -> None:
        if not kind.fatal:
            raise ValueError(f"{kind.value} does not fail the request")
        super().__init__(message, kind)
        self.stderr = stderr
        self.output = output

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"success": False, "error": self.message, "kind": self.kind.value}
        if self.stderr is not None:
            content["stderr"] = self.stderr
        if self.output is not None:
            content["output"] = self.output
        return content
