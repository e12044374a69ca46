"""File adapter for abstracting file system operations."""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from apkship.core.errors import create_file_error
from apkship.protocols import FileAdapterProtocol


logger = logging.getLogger(__name__)


class FileSystemAdapter:
    """File system adapter implementation."""

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        try:
            logger.debug("Reading text file: %s", path)
            with path.open(mode="r", encoding=encoding) as f:
                content = f.read()
            logger.debug("Successfully read %d characters from %s", len(content), path)
            return content
        except FileNotFoundError as e:
            logger.error("File not found: %s", path)
            raise create_file_error(path, "read_text", e, {"encoding": encoding}) from e
        except PermissionError as e:
            logger.error("Permission denied reading file: %s", path)
            raise create_file_error(path, "read_text", e, {"encoding": encoding}) from e
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error reading file %s: %s", path, e)
            raise create_file_error(path, "read_text", e, {"encoding": encoding}) from e

    def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file.

        The content goes to a temporary sibling first and is moved over the
        target with os.replace, so readers never observe a partial file.
        """
        self.mkdir(path.parent)
        tmp_name: str | None = None
        try:
            logger.debug("Writing text file: %s", path)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding=encoding,
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
            os.replace(tmp_name, path)
            tmp_name = None
            logger.debug("Successfully wrote %d characters to %s", len(content), path)
        except OSError as e:
            logger.error("Error writing file %s: %s", path, e)
            raise create_file_error(
                path, "write_text", e, {"content_length": len(content)}
            ) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def read_json(self, path: Path, encoding: str = "utf-8") -> dict[str, Any]:
        """Read and parse a JSON object from a file."""
        content = self.read_text(path, encoding)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in file %s: %s", path, e)
            raise create_file_error(path, "read_json", e, {"encoding": encoding}) from e

        if not isinstance(data, dict):
            error = create_file_error(
                path, "read_json", ValueError("Expected a JSON object"), {}
            )
            logger.error("JSON document in %s is not an object", path)
            raise error
        logger.debug("Successfully parsed JSON from %s", path)
        return data

    def write_json(
        self,
        path: Path,
        data: dict[str, Any],
        encoding: str = "utf-8",
        indent: int = 2,
    ) -> None:
        """Write data as JSON to a file."""
        try:
            content = json.dumps(data, indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Cannot serialize data to JSON for file %s: %s", path, e)
            raise create_file_error(
                path, "write_json", e, {"data_type": type(data).__name__}
            ) from e
        self.write_text(path, content + "\n", encoding)

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def is_file(self, path: Path) -> bool:
        """Check if a path is a file."""
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        return path.is_symlink()

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory."""
        try:
            path.mkdir(parents=parents, exist_ok=exist_ok)
        except OSError as e:
            logger.error("Error creating directory %s: %s", path, e)
            raise create_file_error(
                path, "mkdir", e, {"parents": parents, "exist_ok": exist_ok}
            ) from e

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a file from source to destination."""
        self.mkdir(dst.parent)
        try:
            logger.debug("Copying file: %s -> %s", src, dst)
            shutil.copyfile(src, dst)
        except FileNotFoundError as e:
            logger.error("Source file not found: %s", src)
            raise create_file_error(
                src, "copy_file", e, {"source": str(src), "destination": str(dst)}
            ) from e
        except OSError as e:
            logger.error("Error copying file %s to %s: %s", src, dst, e)
            raise create_file_error(
                src, "copy_file", e, {"source": str(src), "destination": str(dst)}
            ) from e

    def list_directory(self, path: Path) -> list[Path]:
        """List all items in a directory."""
        try:
            items = list(path.iterdir())
            logger.debug("Found %d items in %s", len(items), path)
            return items
        except OSError as e:
            logger.debug("Error listing directory %s: %s", path, e)
            raise create_file_error(path, "list_directory", e, {}) from e

    def remove_file(self, path: Path) -> None:
        """Remove a file. Does not raise error if file not found."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Error removing file %s: %s", path, e)
            raise create_file_error(path, "remove_file", e, {}) from e

    def remove_dir(self, path: Path, recursive: bool = True) -> None:
        """Remove a directory and optionally its contents."""
        try:
            if recursive:
                shutil.rmtree(path)
            else:
                path.rmdir()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("Error removing directory %s: %s", path, e)
            raise create_file_error(
                path, "remove_dir", e, {"recursive": recursive}
            ) from e


def create_file_adapter() -> FileAdapterProtocol:
    """Create a file adapter with default implementation."""
    return FileSystemAdapter()


__all__ = ["FileSystemAdapter", "create_file_adapter"]
