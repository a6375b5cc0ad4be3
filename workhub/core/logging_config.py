"""
Logging setup for the WorkHub API.

Console output for operators, a rotating file with call-site detail for
post-mortems. Payloads that may carry credentials or OTP codes go through
sanitize_log_data() before they are logged.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

from workhub.core.config import LOG_DIR

LOG_FILE_NAME = "workhub.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# Chatty libraries kept at WARNING regardless of LOG_LEVEL
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "apscheduler", "passlib")

SENSITIVE_KEYS = ("password", "token", "secret", "otp", "api_key", "database_url")
REDACTED = "***REDACTED***"


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None):
    """
    Configure the root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for workhub.log (defaults to LOG_DIR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    directory = Path(log_dir or LOG_DIR)
    directory.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))

    file_handler = RotatingFileHandler(
        directory / LOG_FILE_NAME,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in (console_handler, file_handler):
        handler.setLevel(level)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(f"Logging configured: level={logging.getLevelName(level)}, file={directory / LOG_FILE_NAME}")


def sanitize_log_data(data: dict) -> dict:
    """
    Copy of data with sensitive values redacted, nested dicts included.

    A key is sensitive when it contains any of SENSITIVE_KEYS
    (case-insensitive), e.g. "password", "otp_code", "access_token".
    """
    sanitized = {}
    for key, value in data.items():
        if any(sensitive in str(key).lower() for sensitive in SENSITIVE_KEYS):
            sanitized[key] = REDACTED
        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        else:
            sanitized[key] = value
    return sanitized
