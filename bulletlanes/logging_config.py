"""
Centralized Logging Configuration

Scheduler records may carry the item and lane they are about. Both
formatters render that context: the readable one as a bracketed prefix,
the JSON one as top-level fields.
"""

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, Optional

READABLE_FORMAT = '%(asctime)s.%(msecs)03d - %(levelname)s - %(name)s - %(bullet_context)s%(message)s'
LOCATION_FORMAT = (
    '%(asctime)s.%(msecs)03d - %(levelname)s - %(name)s - '
    '%(module)s.%(funcName)s:%(lineno)d - %(bullet_context)s%(message)s'
)

# Third-party loggers that are too chatty at DEBUG
QUIET_LOGGERS = ('PIL',)


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Lane, item and free-form context attached to a record, in that order."""
    found: Dict[str, Any] = {}
    if hasattr(record, 'lane_index'):
        found['lane_index'] = record.lane_index
    if hasattr(record, 'item_id'):
        found['item_id'] = record.item_id
    if isinstance(getattr(record, 'context', None), dict):
        found['context'] = record.context
    return found


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        log_data.update(record_context(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """
    Human-readable formatter, e.g.
    ``... - bulletlanes.screen - [Lane: 0] [Item: 3f2a...] Placed item``.
    """

    def __init__(self, include_location: bool = False):
        super().__init__(
            fmt=LOCATION_FORMAT if include_location else READABLE_FORMAT,
            datefmt='%Y-%m-%d %H:%M:%S',
        )

    def format(self, record: logging.LogRecord) -> str:
        found = record_context(record)
        parts = []
        if 'lane_index' in found:
            parts.append(f"[Lane: {found['lane_index']}]")
        if 'item_id' in found:
            parts.append(f"[Item: {found['item_id']}]")
        for key, value in found.get('context', {}).items():
            parts.append(f"[{key}: {value}]")
        # Kept on its own attribute so other handlers see the original message
        record.bullet_context = ' '.join(parts) + ' ' if parts else ''
        return super().format(record)


def setup_logging(
    level: Optional[int] = None,
    format_type: str = 'readable',
    include_location: bool = False,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level (defaults to INFO, or DEBUG if BULLETLANES_DEBUG=true)
        format_type: 'readable' or 'json'
        include_location: Add module/function/line to readable output
        log_file: Optional file that receives the same records
    """
    if level is None:
        debug = os.environ.get('BULLETLANES_DEBUG', '').lower() == 'true'
        level = logging.DEBUG if debug else logging.INFO

    if format_type == 'json':
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = ContextualFormatter(include_location=include_location)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            sys.stderr.write(f"Warning: Could not set up file logging to {log_file}: {e}\n")
        else:
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    item_id: Optional[str] = None,
    lane_index: Optional[int] = None,
    exc_info: Optional[Any] = None
) -> None:
    """Log a message carrying item/lane context for the formatters above."""
    extra: Dict[str, Any] = {}
    if context:
        extra['context'] = context
    if item_id:
        extra['item_id'] = item_id
    if lane_index is not None:
        extra['lane_index'] = lane_index

    logger.log(level, message, extra=extra, exc_info=exc_info)


def log_debug(logger: logging.Logger, message: str, **kwargs) -> None:
    log_with_context(logger, logging.DEBUG, message, **kwargs)
