"""Centralized structured logging library.

Usage:
    # At service startup
    from libs.common.logging import configure_logging
    configure_logging(service_name="reporting_worker", log_level="INFO")

    # Anywhere else
    from libs.common.logging import get_logger, log_with_context
    logger = get_logger(__name__)
    log_with_context(logger, "INFO", "Password retrieved", key="reporting_db")
"""

from libs.common.logging.config import (
    configure_logging,
    get_logger,
    log_with_context,
)
from libs.common.logging.formatter import JSONFormatter

__all__ = [
    "configure_logging",
    "get_logger",
    "log_with_context",
    "JSONFormatter",
]
