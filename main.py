"""
Main entrypoint: FastAPI server for the SOS broadcast relay.

    python main.py           serve POST /api/emergency with uvicorn
    python main.py --once    run the broadcast script once and print the JSON response

Env: SOS_SCRIPT_COMMAND, SOS_SCRIPT_CWD, SOS_CHAIN_ID, SOS_SCRIPT_TIMEOUT_SEC, API_HOST, API_PORT, etc.

API only: uvicorn backend_sos.api_server.app:app --host 0.0.0.0 --port 8000
"""

import argparse
import json
import sys

# Configure structured JSON logging before other imports that may log
from backend_sos.sos_logging import get_logger

logger = get_logger("main")


def run_once() -> int:
    """Run the pipeline a single time; print the API-shaped response. Return exit code."""
    from backend_sos.broadcast import ResolutionPipeline
    from backend_sos.config import get_settings

    settings = get_settings()
    outcome = ResolutionPipeline.from_settings(settings).resolve()
    if outcome.succeeded:
        body = {"success": True, "output": outcome.raw_output, "txHash": outcome.tx_hash}
    else:
        body = {
            "success": False,
            "error": outcome.diagnostic,
            "kind": outcome.error_kind.value,
            "stderr": outcome.stderr,
            "output": outcome.raw_output,
        }
    print(json.dumps(body, indent=2))
    return 0 if outcome.succeeded else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="SOS broadcast relay")
    parser.add_argument("--once", action="store_true", help="Run the broadcast script once and exit")
    args = parser.parse_args()

    if args.once:
        sys.exit(run_once())

    from backend_sos.config import get_settings
    from backend_sos.api_server.app import app
    import uvicorn

    settings = get_settings()
    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        script=settings.script_name,
        chain_id=settings.chain_id,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
