"""Logging configuration for the importer."""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from importer.utilities.logging_utils import ContextFilter

LOG_FORMAT = (
    "%(asctime)s - [%(processName)s:%(process)d:%(doc_id)s] "
    "- %(levelname)s - %(message)s"
)


def _find_log_dir() -> Optional[str]:
    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        return log_dir
    if os.path.exists("logs"):
        return "logs"
    return None


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Setup logging to console, and to a rotating file when a log directory exists."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_dir = _find_log_dir()
    if log_dir:
        handlers.append(
            RotatingFileHandler(
                os.path.join(log_dir, "importer.log"),
                maxBytes=50 * 1024 * 1024,
                backupCount=20,
            )
        )

    context_filter = ContextFilter()
    for handler in handlers:
        handler.addFilter(context_filter)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger(__name__)
