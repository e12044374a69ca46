"""Process execution and streaming output handling.

This module provides tools for running subprocesses and handling their output
streams. Output lines are handed to a middleware object as they arrive, which
lets callers log, transform or accumulate them in real time.

Example:
    ```python
    from apkship.utils.stream_process import CombinedOutputMiddleware, run_command

    capture = CombinedOutputMiddleware()
    return_code, _stdout, _stderr = run_command(
        ["./gradlew", "assembleDebug"], middleware=capture, cwd=project_root
    )
    print(capture.text)
    ```
"""

import logging
import shlex
import subprocess
from pathlib import Path
from threading import Lock, Thread
from typing import Any, Generic, TypeAlias, TypeVar, cast


T = TypeVar("T")  # Type of processed output

# Type alias for the result of run_command
ProcessResult: TypeAlias = tuple[int, list[T], list[T]]  # (return_code, stdout, stderr)

logger = logging.getLogger(__name__)


class OutputMiddleware(Generic[T]):
    """Base class for processing command output streams.

    Type parameter T represents the return type of the process method,
    allowing middleware to transform strings into other types if needed.
    """

    def process(self, line: str, stream_type: str) -> T:
        """Process a line of output from a subprocess stream.

        Args:
            line: A line of text from the process output
            stream_type: Either "stdout" or "stderr"

        Returns:
            Processed output of type T
        """
        raise NotImplementedError()


class LoggerOutputMiddleware(OutputMiddleware[str]):
    """Forward every line to a logger (stdout at DEBUG, stderr at INFO)."""

    def __init__(self, target: logging.Logger | None = None, prefix: str = "") -> None:
        self.logger = target or logger
        self.prefix = prefix

    def process(self, line: str, stream_type: str) -> str:
        if stream_type == "stdout":
            self.logger.debug("%s%s", self.prefix, line)
        else:
            self.logger.info("%s%s", self.prefix, line)
        return line


class CombinedOutputMiddleware(OutputMiddleware[str]):
    """Accumulate stdout and stderr in arrival order.

    Both reader threads feed the same buffer, so the captured text keeps the
    interleaving the process produced. An optional downstream middleware sees
    every line as well.
    """

    def __init__(self, downstream: OutputMiddleware[Any] | None = None) -> None:
        self.lines: list[str] = []
        self._lock = Lock()
        self._downstream = downstream

    def process(self, line: str, stream_type: str) -> str:
        with self._lock:
            self.lines.append(line)
        if self._downstream is not None:
            self._downstream.process(line, stream_type)
        return line

    @property
    def text(self) -> str:
        with self._lock:
            if not self.lines:
                return ""
            return "\n".join(self.lines) + "\n"


def run_command(
    cmd: str | list[str],
    middleware: OutputMiddleware[T] | None = None,
    cwd: Path | str | None = None,
    env: dict[str, str] | None = None,
) -> ProcessResult[T]:
    """Run a command and process its output through middleware.

    Args:
        cmd: Command to run, either as a string or list of arguments
        middleware: Optional middleware for processing output (logs lines if None)
        cwd: Working directory of the child process
        env: Environment of the child process (inherited when None)

    Returns:
        Tuple containing:
            - Return code from the process (0 for success)
            - List of processed stdout lines
            - List of processed stderr lines

    Raises:
        OSError: If the executable cannot be started
    """
    if middleware is None:
        middleware = cast(OutputMiddleware[T], LoggerOutputMiddleware())

    if isinstance(cmd, str):
        cmd = shlex.split(cmd)

    process = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        stdin=subprocess.DEVNULL,
        text=True,
        encoding="utf-8",
        errors="replace",
        bufsize=1,
        cwd=cwd,
        env=env,
    )

    def stream_output(stream: Any, stream_type: str) -> list[T]:
        captured: list[T] = []
        for line in iter(stream.readline, ""):
            if line:
                processed = middleware.process(line.rstrip("\r\n"), stream_type)
                if processed is not None:
                    captured.append(processed)
        stream.close()
        return captured

    stdout_lines: list[T] = []
    stderr_lines: list[T] = []

    stdout_thread = Thread(
        target=lambda: stdout_lines.extend(stream_output(process.stdout, "stdout"))
    )
    stderr_thread = Thread(
        target=lambda: stderr_lines.extend(stream_output(process.stderr, "stderr"))
    )

    stdout_thread.daemon = True
    stderr_thread.daemon = True

    stdout_thread.start()
    stderr_thread.start()

    return_code = process.wait()

    stdout_thread.join()
    stderr_thread.join()

    return return_code, stdout_lines, stderr_lines
