"""Logging setup shared by the API server and the report CLI.

Every record goes to stdout and to a log file through the root logger.
uvicorn's own loggers are routed through the same handlers, and SQL
statement logging stays quiet unless the level is DEBUG.
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers uvicorn configures for itself when log_config is not None
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(name: str | None) -> int:
    """Map a level name such as AppConfig.log_level to a logging constant.

    Unknown or empty names resolve to INFO.
    """
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_file: str = "logs/roomledger.log", level: str = "INFO") -> logging.Logger:
    """
    Route application, server and SQL logging to stdout and a file.

    Args:
        log_file: Path to the log file, its directory is created when missing
        level: Level name, usually AppConfig.log_level

    Returns:
        The "roomledger" logger
    """
    log_level = resolve_level(level)
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout), logging.FileHandler(log_path)]

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.setLevel(log_level)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    # INFO on sqlalchemy.engine echoes every statement
    sql_level = logging.INFO if log_level <= logging.DEBUG else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)

    return logging.getLogger("roomledger")
