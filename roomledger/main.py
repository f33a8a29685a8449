"""Main application entry point."""

import logging

import uvicorn

from roomledger.api.app import app
from roomledger.services import configure_database
from roomledger.services.config import AppConfig, load_config
from roomledger.services.locale_service import configure_locale
from roomledger.services.logging import setup_logging

logger = logging.getLogger(__name__)


def configure(config: AppConfig) -> None:
    """Apply configuration to logging, the database engine and formatting."""
    setup_logging(config.log_file, config.log_level)
    configure_database(config.database_url)
    configure_locale(config.locale)


def main() -> None:
    """Load configuration, set up logging and serve the API."""
    config = load_config()
    configure(config)
    logger.info(f"Starting API on {config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
