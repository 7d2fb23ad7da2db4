"""Observability package for xtxid."""

from observability.logging import JSONFormatter, sanitize_log_data, setup_logging, get_logger

__all__ = [
    "JSONFormatter",
    "sanitize_log_data",
    "setup_logging",
    "get_logger",
]
