"""Desktop adapter for revealing directories in the platform file manager."""

import logging
import subprocess
import sys
from pathlib import Path

from apkship.core.errors import ConfigError, ExternalProcessError, NotFoundError


logger = logging.getLogger(__name__)


def file_manager_command(platform: str | None = None) -> str:
    """Return the opener executable for a platform (defaults to the current one)."""
    platform = platform or sys.platform
    if platform == "darwin":
        return "open"
    if platform.startswith("win"):
        return "explorer"
    return "xdg-open"


class DesktopAdapter:
    """Open directories with the operating system's file manager."""

    def __init__(self, platform: str | None = None) -> None:
        self.opener = file_manager_command(platform)

    def reveal_directory(self, path: Path) -> None:
        """Show a directory to the user.

        Raises:
            NotFoundError: If the path does not exist
            ConfigError: If the path is not a directory
            ExternalProcessError: If the file manager cannot be launched
        """
        if not path.exists():
            raise NotFoundError(f"Directory does not exist: {path}")
        if not path.is_dir():
            raise ConfigError(f"Path is not a directory: {path}")

        logger.debug("Revealing %s with %s", path, self.opener)
        try:
            result = subprocess.run(
                [self.opener, str(path)], capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise ExternalProcessError(
                f"Failed to open directory {path}: {e}", context={"opener": self.opener}
            ) from e

        # explorer.exe reports 1 even when the window opened
        if result.returncode != 0 and self.opener != "explorer":
            raise ExternalProcessError(
                f"Failed to open directory {path}: {result.stderr.strip()}",
                exit_code=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )


def reveal_directory(path: Path) -> None:
    """Reveal a directory using the current platform's file manager."""
    DesktopAdapter().reveal_directory(path)


def create_desktop_adapter(platform: str | None = None) -> DesktopAdapter:
    """Create a desktop adapter for the given (or current) platform."""
    return DesktopAdapter(platform)
