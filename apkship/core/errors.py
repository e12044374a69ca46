"""Exception hierarchy for apkship.

Every error carries a human readable message plus an optional context
dictionary so callers (and the CLI error handler) can log structured
details without parsing the message.
"""

from pathlib import Path
from typing import Any


class ApkshipError(Exception):
    """Base class for all apkship errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __str__(self) -> str:
        return self.message


class NotFoundError(ApkshipError):
    """Unknown project, publish profile or path."""


class ConfigError(ApkshipError):
    """Missing launcher, missing credentials, unsupported platform or bad config."""


class RegistryError(ConfigError):
    """Registry edit rejected (duplicate name, malformed registry file)."""


class BuildError(ApkshipError):
    """Build finished without producing anything to release."""


class ExternalProcessError(ApkshipError):
    """An external process exited with a non-zero code or could not start."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class ExternalServiceError(ApkshipError):
    """A remote service answered with a failure code or a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context)
        self.status_code = status_code
        self.response_data = response_data


class PublishTimeoutError(ApkshipError):
    """Gave up waiting for a remote service to finish processing."""


class FileSystemError(ApkshipError):
    """A filesystem operation failed."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        operation: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context)
        self.path = path
        self.operation = operation


def create_file_error(
    path: Path,
    operation: str,
    original_error: Exception,
    details: dict[str, Any] | None = None,
) -> FileSystemError:
    """Wrap an OS level exception into a FileSystemError.

    Args:
        path: Path the operation was working on
        operation: Name of the failed operation (e.g. "copy_file")
        original_error: The exception that was raised
        details: Extra context to attach

    Returns:
        FileSystemError describing the failure
    """
    context = {"path": str(path), "operation": operation}
    if details:
        context.update(details)
    context["error_type"] = type(original_error).__name__

    return FileSystemError(
        f"File operation '{operation}' failed on {path}: {original_error}",
        path=path,
        operation=operation,
        context=context,
    )


__all__ = [
    "ApkshipError",
    "BuildError",
    "ConfigError",
    "ExternalProcessError",
    "ExternalServiceError",
    "FileSystemError",
    "NotFoundError",
    "PublishTimeoutError",
    "RegistryError",
    "create_file_error",
]
