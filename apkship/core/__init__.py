from .errors import (
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
from .logging import get_logger, setup_logging


__all__ = [
    "setup_logging",
    "get_logger",
    "ApkshipError",
    "BuildError",
    "ConfigError",
    "ExternalProcessError",
    "ExternalServiceError",
    "FileSystemError",
    "NotFoundError",
    "PublishTimeoutError",
    "RegistryError",
]
