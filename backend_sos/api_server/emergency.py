"""
FastAPI router: POST /emergency, GET /emergency/status.

POST runs the SOS broadcast script synchronously and returns its output and
the resolved transaction hash. The script may submit a live transaction, so
overlapping requests are never run in parallel (see broadcast.gate).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_sos.broadcast import ResolutionOutcome, ResolutionPipeline, get_gate
from backend_sos.config import Settings, get_settings
from backend_sos.core.exceptions import ErrorKind, InvocationInProgress, ScriptExecutionError
from backend_sos.sos_logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/emergency", tags=["emergency"])


class EmergencyResponse(BaseModel):
    """POST /emergency success body. txHash is null when the script ran but no hash was found."""

    success: bool = Field(True, description="Script ran and exited 0")
    output: str = Field("", description="Raw stdout of the broadcast script")
    txHash: str | None = Field(None, description="0x-prefixed transaction hash, or null")


class EmergencyStatusResponse(BaseModel):
    busy: bool = Field(..., description="A broadcast is currently running")
    script: str
    chainId: int


def get_pipeline(settings: Settings = Depends(get_settings)) -> ResolutionPipeline:
    """Dependency: pipeline for the configured script (gate is shared process-wide)."""
    return ResolutionPipeline.from_settings(settings)


def _raise_for_failure(outcome: ResolutionOutcome) -> None:
    """Raise ScriptExecutionError when the outcome carries a request-failing error kind."""
    kind = outcome.error_kind
    if kind is None or not kind.fatal:
        return
    launched = kind is not ErrorKind.LAUNCH_FAILURE
    raise ScriptExecutionError(
        outcome.diagnostic or "Script execution failed",
        kind,
        stderr=outcome.stderr if launched else None,
        output=outcome.raw_output if launched else None,
    )


@router.post("", response_model=EmergencyResponse)
def trigger_emergency(pipeline: ResolutionPipeline = Depends(get_pipeline)) -> Any:
    """
    Run the broadcast script and resolve the transaction hash.

    200: script exited 0 (txHash may be null). 500: launch failure, timeout or
    non-zero exit, with stderr/output preserved. 409: another broadcast is running.
    """
    try:
        outcome = pipeline.resolve()
    except InvocationInProgress as e:
        logger.warning("emergency_rejected_busy", script=e.script)
        return JSONResponse(
            status_code=409,
            content={"success": False, "error": e.message, "kind": e.kind.value},
        )

    _raise_for_failure(outcome)

    logger.info("emergency_resolved", source=outcome.source.value, tx_hash=outcome.tx_hash)
    return EmergencyResponse(success=True, output=outcome.raw_output, txHash=outcome.tx_hash)


@router.get("/status", response_model=EmergencyStatusResponse)
def emergency_status(settings: Settings = Depends(get_settings)) -> EmergencyStatusResponse:
    gate = get_gate(settings.script_name, settings.concurrency_mode)
    return EmergencyStatusResponse(busy=gate.busy, script=settings.script_name, chainId=settings.chain_id)
