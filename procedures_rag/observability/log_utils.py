"""
Logging helpers for retrieval log lines.

Search context (mode, limit, threshold, timings) is attached to records as
`extra` fields; query text is shortened before it reaches a log line.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Render a context value for a log record.

    Floats are rounded to four places; long strings are cut at max_length.
    """
    if isinstance(value, float):
        return str(round(value, 4))
    text = str(value)
    if len(text) > max_length:
        return text[:max_length] + f"... ({len(text)} chars)"
    return text


def preview(text: str, length: int = 50) -> str:
    """Shorten free text for log lines."""
    return text[:length] + ("..." if len(text) > length else "")


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log message with each context value rendered by safe_log_value."""
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context: Any,
) -> None:
    """
    Log an exception with its type, message and search context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception being reported
        **context: Search context (limit, threshold, elapsed_seconds, ...)
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = str(exc)
    logger.exception(message, extra=extra)
