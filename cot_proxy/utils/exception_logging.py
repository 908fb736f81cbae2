"""
Exception formatting and logging helpers that never raise themselves.
"""

import logging


def _safe_str(obj) -> str:
    """
    Safely convert an object to string, handling cases where __str__ or __repr__ might fail.

    Args:
        obj: The object to convert to string

    Returns:
        A string representation of the object, falling back to safe alternatives
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            try:
                return f"<{type(obj).__name__} object (string conversion failed)>"
            except Exception:
                return "<object (all string conversions failed)>"


def format_exception_message(exception: Exception) -> str:
    """
    Render an exception as the text reported back to HTTP clients.

    Falls back to the exception type name when the exception has no message,
    so clients never receive an empty error string.
    """
    if exception is None:
        return "None"
    text = _safe_str(exception)
    if text:
        return text
    try:
        return type(exception).__name__
    except Exception:
        return "<exception (formatting failed)>"


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: Exception,
    level: int = logging.ERROR,
    include_traceback: bool = True,
) -> None:
    """
    Log an exception with a component prefix.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g., "[Relay]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
        include_traceback: Attach exc_info to the record
    """
    safe_prefix = _safe_str(prefix) if prefix is not None else ""
    exc_type = type(exception).__name__
    message = f"{safe_prefix} {exc_type}: {format_exception_message(exception)}"
    attach = include_traceback and exception is not None
    try:
        logger.log(level, message, exc_info=exception if attach else False)
    except Exception:
        try:
            logger.log(level, f"{safe_prefix} Exception (logging failed)")
        except Exception:
            # Logging must never take the request down with it
            pass
