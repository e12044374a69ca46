"""Service layer composing build and publish."""

from .release_worker import ReleaseWorker


__all__ = ["ReleaseWorker"]
