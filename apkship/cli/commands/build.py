"""Build command."""

from pathlib import Path
from typing import Annotated

import typer

from apkship.adapters import reveal_directory
from apkship.build import create_build_service
from apkship.cli.app import get_app_context
from apkship.cli.commands.publish import print_publish_result, resolve_profile
from apkship.cli.decorators import handle_errors
from apkship.cli.helpers.theme import get_themed_console
from apkship.core.errors import BuildError
from apkship.publish import create_publish_service
from apkship.registry import create_project_registry


@handle_errors
def build(
    ctx: typer.Context,
    project: Annotated[
        str, typer.Option("--project", "-p", help="Registered project name")
    ],
    module: Annotated[
        str | None, typer.Option("--module", "-m", help="Module override")
    ] = None,
    variant: Annotated[
        str | None, typer.Option("--variant", help="Variant override")
    ] = None,
    build_type: Annotated[
        str | None,
        typer.Option("--build-type", "-b", help="Build type override"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Where to stage the artifacts"),
    ] = None,
    extra_args: Annotated[
        list[str] | None,
        typer.Option("--arg", help="Extra build tool argument (repeatable)"),
    ] = None,
    publish_profile: Annotated[
        str | None,
        typer.Option("--publish", help="Publish the first artifact with this profile"),
    ] = None,
    changelog: Annotated[
        str | None, typer.Option("--changelog", help="Release notes for --publish")
    ] = None,
    reveal: Annotated[
        bool, typer.Option("--reveal", help="Open the output directory afterwards")
    ] = False,
) -> None:
    """Build a registered project and stage its APK/AAB files."""
    app_context = get_app_context(ctx)
    icon_mode = app_context.icon_mode
    themed = get_themed_console(icon_mode)

    registry = create_project_registry(app_context.user_config)
    service = create_build_service(registry)

    themed.print_with_icon("BUILD", f"Building {project}")
    result = service.build(
        project,
        module=module,
        variant=variant,
        build_type=build_type,
        output_dir=output_dir,
        extra_args=extra_args or (),
    )
    typer.echo(result.output, nl=False)

    if not result.success:
        get_themed_console(icon_mode, stderr=True).print_error(
            f"Build failed ({result.task}, exit code {result.exit_code})"
        )
        raise typer.Exit(1)

    themed.print_success(
        f"Build succeeded ({result.task}), {len(result.staged_files)} "
        f"artifacts in {result.output_dir}"
    )
    if not result.staged_files:
        themed.print_warning("No APK/AAB files were staged")

    if reveal and result.output_dir is not None:
        reveal_directory(result.output_dir)

    if publish_profile:
        artifacts = service.find_publishable_artifacts(result.output_dir or Path())
        if not artifacts:
            raise BuildError(f"No APK/AAB files found in {result.output_dir}")
        profile = resolve_profile(ctx, publish_profile)
        themed.print_with_icon(
            "UPLOAD", f"Publishing {artifacts[0].name} with {profile.name}"
        )
        publish_result = create_publish_service(app_context.user_config).publish(
            artifacts[0], profile, changelog
        )
        print_publish_result(publish_result, icon_mode)
        if not publish_result.success:
            raise typer.Exit(1)


def register_commands(app: typer.Typer) -> None:
    """Register the build command with the main app."""
    app.command(name="build")(build)
