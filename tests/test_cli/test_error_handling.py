"""Tests for the CLI error handling decorator."""

import pytest
import typer
from typer.testing import CliRunner

from apkship.cli.decorators import handle_errors
from apkship.core.errors import ExternalServiceError, NotFoundError


def make_app(error: BaseException | None) -> typer.Typer:
    app = typer.Typer()

    @app.command()
    @handle_errors
    def run() -> None:
        if error is not None:
            raise error
        typer.echo("done")

    return app


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (NotFoundError("Project not found: app"), "Error: Project not found: app"),
        (
            ExternalServiceError("Uploading file failed, HTTP status 500"),
            "Error: Uploading file failed, HTTP status 500",
        ),
        (FileNotFoundError("gradlew"), "Error: gradlew"),
        (RuntimeError("boom"), "Unexpected error: boom"),
    ],
)
def test_errors_exit_with_status_one(
    cli_runner: CliRunner, error: Exception, expected: str
):
    result = cli_runner.invoke(make_app(error), [])

    assert result.exit_code == 1
    assert expected in result.output


def test_success_passes_through(cli_runner: CliRunner):
    result = cli_runner.invoke(make_app(None), [])

    assert result.exit_code == 0
    assert result.output == "done\n"


def test_exit_is_not_converted(cli_runner: CliRunner):
    result = cli_runner.invoke(make_app(typer.Exit(3)), [])

    assert result.exit_code == 3
    assert "Unexpected error" not in result.output
