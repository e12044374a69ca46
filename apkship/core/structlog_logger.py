"""Structured loggers for apkship services."""

from typing import Any

import structlog


def get_struct_logger(name: str, **context: Any) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, optionally with context bound to every event.

    Events are logged with snake_case names and keyword details, e.g.
    ``logger.info("upload_started", file=str(path))``. Pass
    ``exc_info=logger.isEnabledFor(logging.DEBUG)`` when logging a failure so
    the traceback only appears in debug runs.
    """
    logger = structlog.get_logger(name)
    if context:
        logger = logger.bind(**context)
    return logger  # type: ignore[no-any-return]


class StructlogMixin:
    """Give a service a ``self.logger`` bound to its class name."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if getattr(self, "_logger", None) is None:
            self._logger = get_struct_logger(
                self.__class__.__module__, service=self.__class__.__name__
            )
        return self._logger  # type: ignore[return-value]


def mask_secret(value: str | None, visible: int = 6) -> str:
    """Return a log-safe rendition of a credential."""
    if not value:
        return "<unset>"
    return f"{value[:visible]}..."
