"""Run the RPC server with uvicorn."""

import uvicorn

from expense_tracker.api.app import create_app
from expense_tracker.config import get_settings
from expense_tracker.logging_setup import configure_logging, get_logger


logger = get_logger(__name__)


def main() -> None:
    settings = get_settings().server
    configure_logging(settings.log_level)

    logger.info(
        "server_starting",
        host=settings.server_host,
        port=settings.server_port,
    )

    uvicorn.run(
        create_app(),
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
