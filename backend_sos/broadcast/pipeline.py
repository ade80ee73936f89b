"""
ResolutionPipeline — run the broadcast script, then resolve its transaction hash.

NotStarted -> Running -> Succeeded | Failed

A failed run (launch error, timeout, non-zero exit) is never scanned for a
hash. A clean run resolves from stdout first, then from the broadcast log,
and otherwise succeeds with no hash.
"""

from __future__ import annotations

import uuid
from enum import Enum

from backend_sos.broadcast.broadcast_log import BroadcastLogReader
from backend_sos.broadcast.extractor import HashExtractor
from backend_sos.broadcast.gate import SingleFlightGate, get_gate
from backend_sos.broadcast.models import ExecutionResult, OutcomeSource, ResolutionOutcome
from backend_sos.broadcast.runner import ProcessRunner
from backend_sos.config import Settings
from backend_sos.core.exceptions import ErrorKind
from backend_sos.sos_logging import get_logger
from backend_sos.sos_logging.logger import bind_run, clear_run

logger = get_logger(__name__)


class PipelineState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ResolutionPipeline:
    def __init__(
        self,
        runner: ProcessRunner,
        extractor: HashExtractor,
        log_reader: BroadcastLogReader,
        gate: SingleFlightGate,
    ) -> None:
        self.runner = runner
        self.extractor = extractor
        self.log_reader = log_reader
        self.gate = gate
        self.state = PipelineState.NOT_STARTED

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResolutionPipeline":
        return cls(
            runner=ProcessRunner(
                settings.script_command,
                settings.script_cwd,
                timeout_sec=settings.script_timeout_sec,
            ),
            extractor=HashExtractor(),
            log_reader=BroadcastLogReader(
                settings.broadcast_root,
                settings.script_name,
                settings.chain_id,
            ),
            gate=get_gate(settings.script_name, settings.concurrency_mode),
        )

    def resolve(self) -> ResolutionOutcome:
        """
        Run the script once and resolve the transaction hash.

        Raises InvocationInProgress when the gate rejects a concurrent call.
        Script failures are reported in the returned outcome; an unexpected
        error marks the pipeline FAILED and propagates.
        """
        with self.gate.admit():
            bind_run(uuid.uuid4().hex[:12])
            try:
                self.state = PipelineState.RUNNING
                result = self.runner.run()
                outcome = self._resolve_result(result)
                self.state = PipelineState.SUCCEEDED if outcome.succeeded else PipelineState.FAILED
            except Exception:
                self.state = PipelineState.FAILED
                logger.exception("pipeline_unexpected_error")
                raise
            finally:
                clear_run()
        return outcome

    def _resolve_result(self, result: ExecutionResult) -> ResolutionOutcome:
        if not result.launched:
            return self._fail(result, ErrorKind.LAUNCH_FAILURE, f"Script could not be started: {result.launch_error}")
        if result.timed_out:
            return self._fail(
                result,
                ErrorKind.EXECUTION_TIMEOUT,
                f"Script timed out after {self.runner.timeout_sec}s",
            )
        if result.exit_code != 0:
            return self._fail(
                result,
                ErrorKind.EXECUTION_FAILURE,
                f"Command failed: {' '.join(self.runner.command)} (exit code {result.exit_code})",
            )

        match = self.extractor.extract_with_label(result.stdout)
        if match is not None:
            logger.info("tx_hash_found_in_output", tx_hash=match.identifier.value, label=match.label)
            return ResolutionOutcome(
                succeeded=True,
                source=OutcomeSource.FROM_OUTPUT,
                identifier=match.identifier,
                raw_output=result.stdout,
                stderr=result.stderr,
            )

        logger.info("tx_hash_not_in_output", kind=ErrorKind.EXTRACTION_AMBIGUOUS.value)
        lookup = self.log_reader.read_latest()
        if lookup.found:
            logger.info("tx_hash_found_in_broadcast_log", tx_hash=lookup.identifier.value, path=str(lookup.path))
            return ResolutionOutcome(
                succeeded=True,
                source=OutcomeSource.FROM_BROADCAST_LOG,
                identifier=lookup.identifier,
                raw_output=result.stdout,
                stderr=result.stderr,
            )

        logger.info(
            "tx_hash_not_found",
            kind=ErrorKind.BROADCAST_LOG_UNAVAILABLE.value,
            path=str(lookup.path),
            reason=lookup.diagnostic,
        )
        return ResolutionOutcome(
            succeeded=True,
            source=OutcomeSource.NOT_FOUND,
            raw_output=result.stdout,
            stderr=result.stderr,
            diagnostic=lookup.diagnostic,
        )

    def _fail(self, result: ExecutionResult, kind: ErrorKind, message: str) -> ResolutionOutcome:
        logger.error(
            "script_failed",
            kind=kind.value,
            returncode=result.exit_code,
            stderr=result.stderr,
        )
        return ResolutionOutcome.failed(result, kind, message)
