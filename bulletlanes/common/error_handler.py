"""
Error Handling Utilities

Shared patterns for running code that must not break scheduler
bookkeeping (user callbacks) and for failing loudly on misuse.
"""

import logging
from typing import Any, Callable, Optional, TypeVar, Dict
from bulletlanes.exceptions import BulletLanesError

T = TypeVar('T')


def safe_execute(
    operation: Callable[[], T],
    error_message: str,
    logger: logging.Logger,
    default: Optional[T] = None,
) -> Optional[T]:
    """
    Run an operation, logging and swallowing any exception it raises.

    Args:
        operation: Function to execute
        error_message: Base error message
        logger: Logger instance
        default: Default value to return on error

    Returns:
        Result of operation or default value
    """
    try:
        return operation()
    except Exception as e:
        logger.error("%s: %s", error_message, e, exc_info=True)
        return default


def log_and_raise(
    logger: logging.Logger,
    message: str,
    exception_type: type = BulletLanesError,
    context: Optional[Dict[str, Any]] = None,
    **kwargs: Any
):
    """
    Log an error and raise an exception.

    Args:
        logger: Logger instance
        message: Error message
        exception_type: Type of exception to raise
        context: Optional context dictionary
        **kwargs: Extra keyword arguments for the exception (e.g. target, field)

    Raises:
        exception_type: The specified exception type
    """
    logger.error(message)
    raise exception_type(message, context=context, **kwargs)
