"""Test fixtures for CLI tests."""

import pytest
import typer

from apkship.cli import app
from apkship.cli.commands import register_all_commands


@pytest.fixture(scope="session")
def cli_app() -> typer.Typer:
    """The main app with every command group registered."""
    register_all_commands(app)
    return app
