"""Main CLI application for apkship."""

import logging
import sys
from typing import Annotated

import typer

from apkship import __version__
from apkship.cli.decorators.error_handling import print_stack_trace_if_verbose
from apkship.config import UserConfig, create_user_config
from apkship.core.errors import ConfigError
from apkship.core.logging import setup_logging


__all__ = ["AppContext", "app", "main"]

logger = logging.getLogger(__name__)


# Context object for sharing state
class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
        no_emoji: bool = False,
    ):
        """Initialize AppContext.

        Args:
            verbose: Verbosity level
            log_file: Path to log file
            config_file: Path to configuration file
            no_emoji: Whether to disable emoji icons
        """
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self.no_emoji = no_emoji
        self.user_config: UserConfig = create_user_config(cli_config_path=config_file)

    @property
    def icon_mode(self) -> str:
        return "text" if self.no_emoji else "emoji"


def get_app_context(ctx: typer.Context) -> AppContext:
    """Return the AppContext stored by the main callback."""
    app_context = ctx.find_object(AppContext)
    if app_context is None:
        app_context = AppContext()
        ctx.obj = app_context
    return app_context


# Main app
app = typer.Typer(
    name="apkship",
    help=f"""apkship Android build and release helper v{__version__}

Builds registered Android projects with their Gradle wrapper, stages the
resulting APK/AAB files and publishes them to pgyer or fir.im.

Common workflows:
  • Register a project:  apkship projects add app ~/src/app --module app
  • Build:               apkship build --project app --variant free
  • Build and publish:   apkship build --project app --publish pgyer-beta
  • Publish a file:      apkship publish app-release.apk --profile fir-prod""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


# Global callback
@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    no_emoji: Annotated[
        bool,
        typer.Option("--no-emoji", help="Disable emoji icons in output"),
    ] = False,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """apkship Android build and release helper."""
    if version:
        print(f"apkship v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    try:
        app_context = AppContext(
            verbose=verbose,
            log_file=log_file,
            config_file=config_file,
            no_emoji=no_emoji,
        )
    except ConfigError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1) from e
    ctx.obj = app_context

    # Set log level based on verbosity, debug flag, or config
    log_level = logging.WARNING
    if debug:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    elif verbose >= 2:
        log_level = logging.DEBUG
    elif log_file is None:
        log_level = app_context.user_config.get_log_level_int()

    setup_logging(log_level=log_level, log_file=log_file)


def main() -> int:
    """Main CLI entry point."""
    exit_code = 0

    try:
        from apkship.cli.commands import register_all_commands

        register_all_commands(app)

        app()

    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 0

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
