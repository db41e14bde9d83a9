#!/usr/bin/env python3
"""
Error reporting for ribotyper commands.

RiboError subclasses describe bad input or configuration and are shown
as a single line; any other exception is treated as a bug and logged
with its traceback.
"""
import sys
import logging
import traceback
from functools import wraps
from typing import Callable, TypeVar, Any, Dict, Optional, Union

from .exceptions import RiboError

T = TypeVar('T')

EXIT_RIBO_ERROR = 1
EXIT_UNEXPECTED = 2
EXIT_INTERRUPTED = 130


def format_error(error: Exception, verbose: bool = False) -> str:
    """Describe an error for the terminal

    Args:
        error: Exception to describe
        verbose: Append RiboError details, or the traceback of other errors

    Returns:
        Formatted message
    """
    if not isinstance(error, RiboError):
        if verbose:
            return f"Unexpected Error ({type(error).__name__}): {error}\n{traceback.format_exc()}"
        return f"Unexpected Error: {error}"

    text = f"{type(error).__name__}: {error.message}"
    if verbose and error.details:
        text += f"\nDetails: {error.details}"
    return text


def handle_exceptions(exit_on_error: bool = False) -> Callable[[Callable[..., T]], Callable[..., Union[T, int]]]:
    """Decorator turning exceptions raised by a command into exit codes

    RiboError maps to 1, any other exception to 2 and Ctrl-C to 130.

    Args:
        exit_on_error: Pass the code to sys.exit instead of returning it

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Union[T, int]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Union[T, int]:
            logger = logging.getLogger(func.__module__)
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logger.info("Interrupted by user")
                print("\nInterrupted by user", file=sys.stderr)
                code = EXIT_INTERRUPTED
            except RiboError as e:
                logger.error(format_error(e, verbose=True))
                print(format_error(e), file=sys.stderr)
                code = EXIT_RIBO_ERROR
            except Exception as e:
                logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
                print(format_error(e), file=sys.stderr)
                print("Rerun with -v and --log-file to capture the traceback.", file=sys.stderr)
                code = EXIT_UNEXPECTED

            if exit_on_error:
                sys.exit(code)
            return code
        return wrapper
    return decorator


def cli_error_handler(func: Callable[..., T]) -> Callable[..., T]:
    """handle_exceptions for console entry points, which exit with the code"""
    return handle_exceptions(exit_on_error=True)(func)


def log_exception(logger: logging.Logger,
                  error: Exception,
                  level: int = logging.ERROR,
                  context: Optional[Dict[str, Any]] = None) -> None:
    """Log an error with its details

    RiboError details and the given context are merged into a 'context'
    attribute on the log record. The traceback is included once the
    error has been raised.

    Args:
        logger: Logger to write to
        error: Exception to log
        level: Logging level
        context: Extra key/value pairs for the record
    """
    ctx: Dict[str, Any] = dict(error.details) if isinstance(error, RiboError) else {}
    ctx.update(context or {})
    logger.log(level, format_error(error),
               extra={"context": ctx} if ctx else None,
               exc_info=error if error.__traceback__ is not None else None)
