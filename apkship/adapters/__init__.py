"""Adapters package for external system interfaces."""

from apkship.protocols import FileAdapterProtocol

from .desktop_adapter import DesktopAdapter, create_desktop_adapter, reveal_directory
from .file_adapter import FileSystemAdapter, create_file_adapter


__all__ = [
    "DesktopAdapter",
    "create_desktop_adapter",
    "reveal_directory",
    "FileAdapterProtocol",
    "FileSystemAdapter",
    "create_file_adapter",
]
