"""Utility functions and classes for apkship."""

from .stream_process import (
    CombinedOutputMiddleware,
    LoggerOutputMiddleware,
    OutputMiddleware,
    ProcessResult,
    run_command,
)


__all__ = [
    "CombinedOutputMiddleware",
    "LoggerOutputMiddleware",
    "OutputMiddleware",
    "ProcessResult",
    "run_command",
]
