"""
Structured JSON logging for xtxid.

Provides JSON-formatted logging to stderr with automatic redaction of
verification keys and transaction IDs.
"""

import os
import sys
import json
import logging
import re
from typing import Any, Optional
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    # Patterns for sensitive data to sanitize
    SENSITIVE_PATTERNS = [
        (re.compile(r'(x-client-transaction-id)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
        (re.compile(r'(site-verification\\?"\s+content=\\?")([^"\\]*)', re.IGNORECASE), r'\1***REDACTED***'),
        (re.compile(r'(verification[_-]?key|animation[_-]?key|key[_-]?bytes)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
        (re.compile(r'(cookie|authorization|bearer|token)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
    ]

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Extra fields passed as extra={"extra": {...}}
        if hasattr(record, "extra") and record.extra:
            log_data.update(record.extra)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.ERROR:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        log_json = json.dumps(log_data, default=str)
        return self._sanitize(log_json)

    def _sanitize(self, text: str) -> str:
        """Remove sensitive data from log text."""
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            text = pattern.sub(replacement, text)
        return text


SENSITIVE_KEYS = ("token", "transaction", "verification", "animation_key", "key_bytes", "cookie", "auth")


def sanitize_log_data(data: Any) -> Any:
    """
    Sanitize sensitive data from log payloads.

    Args:
        data: Data to sanitize (dict, str, or other)

    Returns:
        Sanitized copy of the data
    """
    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            if any(sensitive in str(key).lower() for sensitive in SENSITIVE_KEYS):
                sanitized[key] = "***REDACTED***"
            else:
                sanitized[key] = sanitize_log_data(value)
        return sanitized

    elif isinstance(data, (list, tuple)):
        return [sanitize_log_data(item) for item in data]

    elif isinstance(data, str):
        result = data
        for pattern, replacement in JSONFormatter.SENSITIVE_PATTERNS:
            result = pattern.sub(replacement, result)
        return result

    else:
        return data


def setup_logging(
    log_level: Optional[str] = None,
    force_json: bool = True
) -> None:
    """
    Configure application logging.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                   Defaults to LOG_LEVEL env var or INFO
        force_json: JSON output; plain text when False
    """
    level_str = log_level or os.getenv("LOG_LEVEL", "INFO")
    level = getattr(logging, level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # stderr so stdout stays clean for tokens printed by the CLI
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    if force_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("curl_cffi").setLevel(logging.WARNING)

    root_logger.debug(f"Logging configured with level={level_str}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
