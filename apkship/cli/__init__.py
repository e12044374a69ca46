"""Command-line interface for apkship."""

from apkship.cli.app import app, main


__all__ = ["app", "main"]
