"""
Structured logging configuration for the LetsPeppol SDK.

Provides JSON-formatted logging for production environments with
human-readable fallback for development. The SDK itself only calls
get_logger(); setup_logging() is for applications and the CLI.
"""

import os
import sys
import json
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any


# Attributes every LogRecord carries; anything else came in through extra={...}
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord('', 0, '', 0, '', (), None)).keys()
) | {'message', 'asctime'}


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the fields attached to a record via ``extra={...}``."""
    return {
        key: value for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith('_')
    }


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        log_entry.update(extra_fields(record))

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '') if self.use_colors else ''
        reset = self.RESET if color else ''

        timestamp = datetime.now().strftime('%H:%M:%S')
        location = f'{record.module}:{record.lineno}'

        base = f'{color}[{timestamp}] {record.levelname:8}{reset} {location:30} {record.getMessage()}'

        extras = extra_fields(record)
        if extras:
            base = f"{base} | {' | '.join(f'{k}={v}' for k, v in extras.items())}"

        if record.exc_info:
            base = f'{base}\n{self.formatException(record.exc_info)}'

        return base


def setup_logging(
    level: str = 'INFO',
    json_format: Optional[bool] = None,
    logger_name: str = 'letspeppol',
    stream=None,
) -> logging.Logger:
    """Configure and return the SDK logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting. If None, reads LETSPEPPOL_JSON_LOGS.
        logger_name: Name for the logger instance.
        stream: Output stream, defaults to stderr.

    Returns:
        Configured logger instance.
    """
    if json_format is None:
        json_format = os.environ.get('LETSPEPPOL_JSON_LOGS', '').lower() == 'true'

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setLevel(logger.level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter(use_colors=stream.isatty()))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = 'letspeppol') -> logging.Logger:
    """Get a logger instance. Creates child logger if name contains dots.

    Args:
        name: Logger name (e.g., 'letspeppol.session')

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
