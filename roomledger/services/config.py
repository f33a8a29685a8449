"""Application configuration.

Loads settings from .env file and environment variables with sensible defaults.
Validates values and provides clear error messages.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class AppConfig:
    """Runtime configuration for the API server and CLI."""

    database_url: str = "sqlite:///./roomledger.db"
    """SQLAlchemy database URL (default: local SQLite)"""

    log_file: str = "logs/roomledger.log"
    """Path to log file"""

    log_level: str = "INFO"
    """Logging level name"""

    locale: str = "en_IN"
    """Babel locale used for currency formatting"""

    host: str = "0.0.0.0"
    port: int = 8000


def load_config() -> AppConfig:
    """
    Load configuration from .env file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (DATABASE_URL, LOG_FILE, LOG_LEVEL, LOCALE, HOST, PORT)
    2. .env file in project root
    3. Default values

    Returns:
        AppConfig with all settings

    Raises:
        ValueError: If DATABASE_URL is empty or PORT is not a valid port number
    """
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    database_url = os.getenv("DATABASE_URL", AppConfig.database_url).strip()
    if not database_url:
        raise ValueError(
            "DATABASE_URL is empty. "
            "Unset it to use the local SQLite default or provide a SQLAlchemy URL"
        )

    port_str = os.getenv("PORT", str(AppConfig.port))
    try:
        port = int(port_str)
    except ValueError as e:
        raise ValueError(f"PORT must be an integer, got '{port_str}'") from e
    if not 0 < port < 65536:
        raise ValueError(f"PORT out of range: {port}")

    return AppConfig(
        database_url=database_url,
        log_file=os.getenv("LOG_FILE", AppConfig.log_file),
        log_level=os.getenv("LOG_LEVEL", AppConfig.log_level).upper(),
        locale=os.getenv("LOCALE", AppConfig.locale),
        host=os.getenv("HOST", AppConfig.host),
        port=port,
    )
