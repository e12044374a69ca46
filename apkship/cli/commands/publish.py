"""Publish command."""

from pathlib import Path
from typing import Annotated

import typer

from apkship.cli.app import get_app_context
from apkship.cli.decorators import handle_errors
from apkship.cli.helpers.theme import get_themed_console
from apkship.core.errors import ConfigError
from apkship.publish import PublishPlatform, PublishResult, create_publish_service
from apkship.registry import PublishProfile, create_profile_registry


AD_HOC_PROFILE = "<command line>"


def print_publish_result(result: PublishResult, icon_mode: str) -> None:
    """Print a publish result with its links."""
    if not result.success:
        get_themed_console(icon_mode, stderr=True).print_error(
            f"Publish failed: {result.message}"
        )
        return

    themed = get_themed_console(icon_mode)
    themed.print_success(result.message)
    if result.download_url:
        themed.print_link("Download", result.download_url)
    if result.qr_code_url:
        themed.print_link("QR code", result.qr_code_url)
    if result.build_key:
        themed.console.print(f"Build key: {result.build_key}", markup=False)


def resolve_profile(
    ctx: typer.Context,
    profile_name: str | None,
    platform: PublishPlatform | None = None,
    api_key: str | None = None,
    api_token: str | None = None,
    password: str | None = None,
) -> PublishProfile:
    """Load a named profile or build one from command line credentials."""
    if profile_name:
        registry = create_profile_registry(get_app_context(ctx).user_config)
        return registry.get_profile(profile_name)
    if platform is None:
        raise ConfigError("Pass --profile or --platform with credentials")
    return PublishProfile(
        name=AD_HOC_PROFILE,
        platform=platform.value,
        api_key=api_key,
        api_token=api_token,
        password=password,
    )


@handle_errors
def publish(
    ctx: typer.Context,
    files: Annotated[
        list[Path], typer.Argument(help="APK/AAB files to publish, in order")
    ],
    profile_name: Annotated[
        str | None, typer.Option("--profile", "-p", help="Publish profile name")
    ] = None,
    platform: Annotated[
        PublishPlatform | None,
        typer.Option("--platform", help="Platform when no profile is used"),
    ] = None,
    api_key: Annotated[
        str | None, typer.Option("--api-key", help="pgyer API key")
    ] = None,
    api_token: Annotated[
        str | None, typer.Option("--api-token", help="fir.im API token")
    ] = None,
    password: Annotated[
        str | None, typer.Option("--password", help="Install password (pgyer)")
    ] = None,
    changelog: Annotated[
        str | None,
        typer.Option(
            "--changelog", help="Release notes, overrides the profile default"
        ),
    ] = None,
) -> None:
    """Publish artifacts to pgyer or fir.im. Stops at the first failure."""
    app_context = get_app_context(ctx)
    profile = resolve_profile(
        ctx,
        profile_name,
        platform,
        api_key=api_key,
        api_token=api_token,
        password=password,
    )
    service = create_publish_service(app_context.user_config)
    themed = get_themed_console(app_context.icon_mode)

    results = service.publish_many(files, profile, changelog)
    for file, result in zip(files, results, strict=False):
        themed.print_with_icon("UPLOAD", str(file))
        print_publish_result(result, app_context.icon_mode)

    if not all(result.success for result in results):
        raise typer.Exit(1)


def register_commands(app: typer.Typer) -> None:
    """Register the publish command with the main app."""
    app.command(name="publish")(publish)
