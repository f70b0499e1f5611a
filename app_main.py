"""Application entry point for the ExamInsight API."""

from __future__ import annotations

from exam_app.constants.exam_constants import EXPIRY_SWEEP_INTERVAL_SECONDS
from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.exam_manager import ExamManager, start_expiry_sweeper
from exam_app.server.api_server import run_api_server
from exam_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, start the expiry sweeper, and serve the API."""
    logger = configure_logging()
    logger.info("Starting ExamInsight API on %s:%s", DEFAULT_HOST, DEFAULT_PORT)

    exam_manager = ExamManager()
    start_expiry_sweeper(exam_manager, EXPIRY_SWEEP_INTERVAL_SECONDS)
    run_api_server(exam_manager=exam_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
