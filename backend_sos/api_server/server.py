"""
FastAPI server — SOS broadcast relay.

Mounts the emergency router under /api (POST /api/emergency) and a liveness
probe. Config via env (see backend_sos.config).
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from backend_sos import __version__
from backend_sos.api_server.emergency import router as emergency_router
from backend_sos.core.exceptions import ScriptExecutionError
from backend_sos.sos_logging import get_logger

logger = get_logger(__name__)


app = FastAPI(
    title="Backend SOS API",
    description="Runs the SOS broadcast script and returns the submitted transaction hash.",
    version=__version__,
)

app.include_router(emergency_router, prefix="/api", tags=["Emergency"])


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.exception_handler(ScriptExecutionError)
def script_execution_error_handler(request: Any, exc: ScriptExecutionError) -> JSONResponse:
    """Script launch failure, timeout or non-zero exit: 500 with captured output."""
    logger.error("emergency_script_failed", kind=exc.kind.value, error=exc.message)
    return JSONResponse(status_code=500, content=exc.to_content())


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )
