"""Application entry point."""

import logging

import uvicorn

from lift_planner.config import SETTINGS
from lift_planner.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging(SETTINGS.LOG_LEVEL)
    logger.info("Starting HTTP server on %s:%s", SETTINGS.HOST, SETTINGS.PORT)
    uvicorn.run(
        "lift_planner.server.main:app",
        host=SETTINGS.HOST,
        port=SETTINGS.PORT,
        access_log=SETTINGS.ACCESS_LOG,
        log_config=None,
    )


if __name__ == "__main__":
    main()
