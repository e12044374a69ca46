"""Protocol definition for file system operations."""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FileAdapterProtocol(Protocol):
    """Protocol for file system operations."""

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """Read text content from a file.

        Raises:
            FileSystemError: If file cannot be read
        """
        ...

    def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file, replacing it atomically.

        Raises:
            FileSystemError: If file cannot be written
        """
        ...

    def read_json(self, path: Path, encoding: str = "utf-8") -> dict[str, Any]:
        """Read and parse a JSON object from a file.

        Raises:
            FileSystemError: If file cannot be read or JSON is invalid
        """
        ...

    def write_json(
        self, path: Path, data: dict[str, Any], encoding: str = "utf-8", indent: int = 2
    ) -> None:
        """Write data as JSON to a file.

        Raises:
            FileSystemError: If file cannot be written or data cannot be serialized
        """
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def is_file(self, path: Path) -> bool:
        """Check if a path is a file."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        ...

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory.

        Raises:
            FileSystemError: If directory cannot be created
        """
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a file from source to destination, overwriting the destination.

        Raises:
            FileSystemError: If file cannot be copied
        """
        ...

    def list_directory(self, path: Path) -> list[Path]:
        """List all items in a directory.

        Raises:
            FileSystemError: If directory cannot be accessed
        """
        ...

    def remove_file(self, path: Path) -> None:
        """Remove a file. Missing files are ignored.

        Raises:
            FileSystemError: If file cannot be removed
        """
        ...

    def remove_dir(self, path: Path, recursive: bool = True) -> None:
        """Remove a directory and optionally its contents.

        Raises:
            FileSystemError: If directory cannot be removed
        """
        ...
