"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that loads configuration and invokes the orchestrator.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any

import functions_framework
from flask import Request

from src.core.config import get_environment_schema
from src.core.errors import FetchFailure, InvalidConfiguration, PipelineError
from src.core.feeds import FEEDS, get_feed
from src.core.formatter import get_output_schema
from src.orchestrator import Orchestrator
from src.shell.config_loader import load_config, load_config_from_env
from src.shell.submit_client import ConsoleSink


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("FEED_TASK"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def _status_for(error: Exception) -> int:
    """HTTP status to report for a failed run."""
    if isinstance(error, InvalidConfiguration):
        return 400
    if isinstance(error, FetchFailure):
        return 502
    return 500


def _schema_response(config, kind: str) -> tuple[dict[str, Any], int]:
    try:
        feed = get_feed(config.task)
    except KeyError as e:
        return {"status": "error", "message": str(e.args[0])}, 400

    if kind == "input":
        return get_environment_schema(feed), 200
    if kind == "output":
        return get_output_schema(feed), 200
    return {
        "status": "error",
        "message": f"Unknown schema '{kind}', expected 'input' or 'output'",
    }, 400


@functions_framework.http
def earthquake_feed(request: Request) -> tuple[dict[str, Any], int]:
    """HTTP Cloud Function entry point.

    This function is triggered by Cloud Scheduler or direct HTTP requests.
    It runs one complete feed cycle. With ?schema=input or ?schema=output
    it describes the configured task instead.

    Args:
        request: Flask request object

    Returns:
        Tuple of (response dict, HTTP status code)
    """
    try:
        config = _get_config()

        schema = request.args.get("schema") if request.args else None
        if schema:
            return _schema_response(config, schema)

        logger.info("Starting %s feed cycle", config.task)

        orchestrator = Orchestrator(config)
        result = orchestrator.process()

        logger.info("Completed: %s", result.summary)

        return {
            "status": "success",
            "task": result.task,
            "summary": result.summary,
            "earthquakes_fetched": result.earthquakes_fetched,
            "earthquakes_skipped": result.earthquakes_skipped,
            "features_submitted": result.features_submitted,
        }, 200

    except PipelineError as e:
        # Already logged by the orchestrator
        return {
            "status": "error",
            "error": type(e).__name__,
            "message": str(e),
        }, _status_for(e)
    except Exception as e:
        logger.exception("Unexpected error in earthquake feed")
        return {
            "status": "error",
            "error": type(e).__name__,
            "message": str(e),
        }, 500


@functions_framework.cloud_event
def earthquake_feed_pubsub(cloud_event: Any) -> None:
    """Pub/Sub Cloud Function entry point.

    Alternative trigger for Cloud Scheduler via Pub/Sub. Failures are
    re-raised so the runtime records the run as failed.

    Args:
        cloud_event: CloudEvent from Pub/Sub
    """
    config = _get_config()
    logger.info("Starting %s feed cycle (Pub/Sub trigger)", config.task)

    result = Orchestrator(config).process()

    logger.info("Completed: %s", result.summary)


def main(argv: list[str] | None = None) -> int:
    """Run one feed cycle locally.

    Args:
        argv: Command-line arguments (sys.argv[1:] if None)

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(description="Run an earthquake feed task once")
    parser.add_argument(
        "--task",
        choices=sorted(FEEDS),
        help="Feed task to run (overrides config)",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config (default: CONFIG_PATH or config/config.yaml)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the FeatureCollection instead of submitting it",
    )
    parser.add_argument(
        "--schema",
        choices=["input", "output"],
        help="Print the task's input or output schema and exit",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except InvalidConfiguration as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.task:
        config.task = args.task

    if args.schema:
        response, status = _schema_response(config, args.schema)
        print(json.dumps(response, indent=2))
        return 0 if status == 200 else 1

    submitter = ConsoleSink() if args.dry_run else None

    try:
        result = Orchestrator(config, submitter=submitter).process()
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.summary, file=sys.stderr)
    return 0


# For local testing
if __name__ == "__main__":
    sys.exit(main())
