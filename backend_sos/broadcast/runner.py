"""
ProcessRunner — runs the broadcast script and captures its output.

The script may submit a live transaction, so a run is a single irreversible
external effect: no retries here, and launch problems are reported in the
ExecutionResult instead of being raised.
"""

from __future__ import annotations

import subprocess
import time
from pathlib import Path
from typing import Sequence

from backend_sos.broadcast.models import ExecutionResult
from backend_sos.sos_logging import get_logger

logger = get_logger(__name__)

LAUNCH_FAILED_EXIT_CODE = -1


def _to_text(data: str | bytes | None) -> str:
    # TimeoutExpired carries raw bytes even when an encoding is set
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class ProcessRunner:
    """Run a fixed command in a fixed working directory, blocking until it exits."""

    def __init__(
        self,
        command: Sequence[str],
        cwd: str | Path,
        timeout_sec: float | None = None,
    ) -> None:
        if not command:
            raise ValueError("command must be non-empty")
        self.command = tuple(command)
        self.cwd = Path(cwd)
        self.timeout_sec = timeout_sec

    def run(self) -> ExecutionResult:
        cmd_str = " ".join(self.command)
        logger.info("script_run_start", command=cmd_str, cwd=str(self.cwd), timeout_sec=self.timeout_sec)
        started = time.monotonic()
        try:
            result = subprocess.run(
                list(self.command),
                cwd=str(self.cwd),
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_sec,
            )
        except subprocess.TimeoutExpired as e:
            elapsed = time.monotonic() - started
            logger.error("script_timeout", command=cmd_str, timeout_sec=self.timeout_sec)
            return ExecutionResult(
                stdout=_to_text(e.stdout),
                stderr=_to_text(e.stderr),
                exit_code=LAUNCH_FAILED_EXIT_CODE,
                timed_out=True,
                duration_sec=elapsed,
            )
        except OSError as e:
            # FileNotFoundError / PermissionError / NotADirectoryError: the process never ran
            logger.error("script_launch_failed", command=cmd_str, cwd=str(self.cwd), error=str(e))
            return ExecutionResult(
                stdout="",
                stderr="",
                exit_code=LAUNCH_FAILED_EXIT_CODE,
                launch_error=f"{type(e).__name__}: {e}",
                duration_sec=time.monotonic() - started,
            )

        elapsed = time.monotonic() - started
        logger.info(
            "script_run_finished",
            returncode=result.returncode,
            duration_sec=round(elapsed, 3),
            stdout_len=len(result.stdout or ""),
            stderr_len=len(result.stderr or ""),
        )
        return ExecutionResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_code=result.returncode,
            duration_sec=elapsed,
        )
