"""Entry point for running the auth server."""

import uvicorn

from google_auth_strategy.config import get_config
from google_auth_strategy.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    """Entry point for running the auth server."""
    config = get_config()
    configure_logging(config.log_level)

    logger.info("Starting server", port=config.server_port)

    uvicorn.run(
        "google_auth_strategy.server:app",
        host=config.server_host,
        port=config.server_port,
        log_config=None,  # Use our custom structlog configuration
        access_log=False,
    )


if __name__ == "__main__":
    main()
