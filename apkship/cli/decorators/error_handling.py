"""Error handling decorators for CLI commands."""

import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer

from apkship.core.errors import (
    ApkshipError,
    BuildError,
    ConfigError,
    ExternalProcessError,
    ExternalServiceError,
    FileSystemError,
    NotFoundError,
    PublishTimeoutError,
    RegistryError,
)
from apkship.core.structlog_logger import get_struct_logger


__all__ = ["handle_errors", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)

# Checked in order, so subclasses come before their bases
_ERROR_EVENTS: tuple[tuple[type[ApkshipError], str], ...] = (
    (NotFoundError, "not_found"),
    (RegistryError, "registry_error"),
    (ConfigError, "configuration_error"),
    (BuildError, "build_error"),
    (ExternalProcessError, "external_process_error"),
    (ExternalServiceError, "external_service_error"),
    (PublishTimeoutError, "publish_timeout"),
    (FileSystemError, "filesystem_error"),
)


def _event_for(error: ApkshipError) -> str:
    for error_type, event in _ERROR_EVENTS:
        if isinstance(error, error_type):
            return event
    return "apkship_error"


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle common exceptions in CLI commands.

    Known errors are logged with their kind and printed to stderr; any error
    ends the command with exit status 1.

    Args:
        func: The function to decorate

    Returns:
        Decorated function with error handling
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (typer.Exit, typer.Abort):
            raise
        except ApkshipError as e:
            logger.error(_event_for(e), error=e.message, **e.context)
            typer.echo(f"Error: {e.message}", err=True)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except FileNotFoundError as e:
            logger.error("file_not_found", error=str(e))
            typer.echo(f"Error: {e}", err=True)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except Exception as e:
            exc_info = logger.isEnabledFor(logging.DEBUG)
            logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            typer.echo(f"Unexpected error: {e}", err=True)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if any(arg in sys.argv for arg in ["-v", "-vv", "--verbose", "--debug"]):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
