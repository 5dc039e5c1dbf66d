#!/usr/bin/env python3
"""
Error reporting for orthocds commands.

Known OrthoCDSError subclasses are reported in one line (plus a hint where
the fix is obvious); anything else is treated as a bug and logged with its
traceback.
"""
import sys
import traceback
import logging
from functools import wraps
from typing import Callable, TypeVar, Any, Dict, Optional, Union

from .exceptions import (
    OrthoCDSError, OutputExistsError, InputNotFoundError, StrandAmbiguityError,
    ToolError, ConfigurationError
)

T = TypeVar('T')

EXIT_FAILURE = 1
EXIT_UNEXPECTED = 2
EXIT_INTERRUPTED = 130

HINTS = {
    OutputExistsError: "Choose an output directory that does not exist yet.",
    InputNotFoundError: "Check the input path; empty files count as missing.",
    StrandAmbiguityError: "Rerun without --stranded if the library is not strand-specific.",
    ToolError: "Run 'orthocds check-tools' to see which executables are missing.",
    ConfigurationError: "Check the configuration file and ORTHOCDS_* environment variables.",
}


def error_hint(error: Exception) -> Optional[str]:
    """Suggested fix for a known error type, if any"""
    for error_type, hint in HINTS.items():
        if isinstance(error, error_type):
            return hint
    return None


def format_error(error: Exception, verbose: bool = False) -> str:
    """One-line message for stderr

    Args:
        error: The exception to report
        verbose: Append details (known errors) or the traceback (unexpected ones)
    """
    if not isinstance(error, OrthoCDSError):
        text = f"Unexpected Error: {error}"
        if verbose:
            text = (f"Unexpected Error ({error.__class__.__name__}): {error}\n"
                    f"{traceback.format_exc()}")
        return text

    text = f"{error.__class__.__name__}: {error.message}"
    if verbose and error.details:
        text += f"\nDetails: {error.details}"
    return text


def _finish(code: int, exit_on_error: bool) -> int:
    if exit_on_error:
        sys.exit(code)
    return code


def handle_exceptions(exit_on_error: bool = False) -> Callable[[Callable[..., T]], Callable[..., Union[T, int]]]:
    """Turn exceptions raised by a command into exit codes

    OrthoCDSError gives 1, any other exception 2 and Ctrl-C 130. With
    exit_on_error the code is passed to sys.exit instead of returned.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Union[T, int]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Union[T, int]:
            logger = logging.getLogger(func.__module__)
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logger.info("Interrupted")
                print("\nInterrupted", file=sys.stderr)
                return _finish(EXIT_INTERRUPTED, exit_on_error)
            except OrthoCDSError as e:
                log_exception(logger, e)
                print(format_error(e), file=sys.stderr)
                hint = error_hint(e)
                if hint:
                    print(hint, file=sys.stderr)
                return _finish(EXIT_FAILURE, exit_on_error)
            except Exception as e:
                logger.error(f"Unexpected error: {e}", exc_info=True)
                print(format_error(e), file=sys.stderr)
                print("See the log for the traceback; -v adds debug output.", file=sys.stderr)
                return _finish(EXIT_UNEXPECTED, exit_on_error)
        return wrapper
    return decorator


def log_exception(logger: logging.Logger,
                  error: Exception,
                  level: int = logging.ERROR,
                  context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception, merging its details with extra context

    The merged dict is attached to the record as ``record.context``.
    Tracebacks are only attached at ERROR and above for known errors.
    """
    if isinstance(error, OrthoCDSError):
        merged = dict(error.details or {})
        merged.update(context or {})
        logger.log(level, f"{error.__class__.__name__}: {error.message}",
                   extra={"context": merged} if merged else None,
                   exc_info=level >= logging.ERROR)
        return

    logger.log(level, f"Unexpected error: {error}",
               extra={"context": context} if context else None,
               exc_info=True)
