"""CLI command modules."""

import typer

from apkship.cli.commands.build import register_commands as register_build_commands
from apkship.cli.commands.profiles import (
    register_commands as register_profile_commands,
)
from apkship.cli.commands.projects import (
    register_commands as register_project_commands,
)
from apkship.cli.commands.publish import (
    register_commands as register_publish_commands,
)


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_project_commands(app)
    register_profile_commands(app)
    register_build_commands(app)
    register_publish_commands(app)
