"""apkship - build Android projects and publish their artifacts."""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("apkship")
except PackageNotFoundError:
    # Running from a source tree that was never installed
    __version__ = "0.0.0"

__all__ = ["__version__"]
