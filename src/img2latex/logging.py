"""Structured logging setup for img2latex."""

import hashlib
import logging
import logging.handlers
import pathlib
from typing import Any, Dict

import structlog

from .constants import DEFAULT_LOG_BACKUP_COUNT, DEFAULT_LOG_MAX_BYTES, LOG_FILE_NAME


class AuditProcessor:
    """Custom structlog processor that keeps credentials out of the logs."""

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Replace raw API keys with a short hash."""
        if "api_key" in event_dict:
            if event_dict["api_key"]:
                api_key_hash = hashlib.sha256(str(event_dict["api_key"]).encode()).hexdigest()[:16]
                event_dict["api_key_hash"] = api_key_hash
            del event_dict["api_key"]

        return event_dict


def setup_logging(
    log_dir: pathlib.Path,
    level: str = "INFO",
    max_bytes: int = DEFAULT_LOG_MAX_BYTES,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
) -> pathlib.Path:
    """Set up file-only structured logging with rotation.

    Args:
        log_dir: Directory where log files should be created
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        max_bytes: Maximum size per log file before rotation
        backup_count: Number of backup log files to keep

    Returns:
        Path to the main log file
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / LOG_FILE_NAME
    log_file.touch()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            AuditProcessor(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a", encoding="utf-8")),
        cache_logger_on_first_use=True,
    )

    # Route third-party stdlib logging (httpx) to the same file
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[file_handler],
        format="%(message)s",
    )

    return log_file


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ or component name)

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)

