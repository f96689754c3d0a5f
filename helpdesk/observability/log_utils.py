"""
Logging utilities for safe structured logging.

Keeps logged values bounded so that document bodies, query texts, and
embedding vectors never flood the log stream.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from numbers import Number
from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log record's extra fields.

    Numeric sequences are summarized as vectors, other containers by size,
    and long strings are cut to max_length.

    Args:
        value: Value to render
        max_length: Maximum length before truncating

    Returns:
        str: Bounded string representation
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple)):
        if value and all(isinstance(v, Number) for v in value):
            return f"vector({len(value)})"
        rendered = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        rendered = f"dict({len(value)} keys)"
    else:
        try:
            rendered = str(value)
        except Exception as e:
            return f"<unable to log: {type(e).__name__}>"

    if len(rendered) > max_length:
        return f"{rendered[:max_length]}... ({len(rendered)} chars)"
    return rendered


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception with its traceback and bounded context.

    Application exceptions contribute their details dict to the record.
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    for key, val in (getattr(exc, "details", None) or {}).items():
        extra.setdefault(f"detail_{key}", safe_log_value(val))
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(getattr(exc, "message", str(exc)))
    logger.error(message, exc_info=exc, extra=extra)
