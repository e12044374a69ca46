"""Publish profile commands."""

from typing import Annotated

import typer

from apkship.cli.app import get_app_context
from apkship.cli.decorators import handle_errors
from apkship.cli.helpers.theme import TableStyles, get_themed_console
from apkship.core.structlog_logger import mask_secret
from apkship.publish.models import PublishPlatform
from apkship.registry import (
    PublishProfile,
    PublishProfileRegistry,
    create_profile_registry,
)


profiles_app = typer.Typer(
    name="profiles",
    help="Manage publish profiles (pgyer, fir.im)",
    no_args_is_help=True,
)


def _registry(ctx: typer.Context) -> PublishProfileRegistry:
    return create_profile_registry(get_app_context(ctx).user_config)


@profiles_app.command(name="list")
@handle_errors
def list_profiles(ctx: typer.Context) -> None:
    """List publish profiles. Credentials are shown masked."""
    icon_mode = get_app_context(ctx).icon_mode
    profiles = _registry(ctx).list_profiles()
    themed = get_themed_console(icon_mode)

    if not profiles:
        themed.print_info("No publish profiles configured")
        return

    table = TableStyles.create_profile_table(icon_mode)
    for profile in profiles:
        credential = profile.api_key or profile.api_token
        table.add_row(
            profile.name,
            profile.platform,
            mask_secret(credential),
            "yes" if profile.password else "no",
            profile.default_description or "-",
        )
    themed.console.print(table)


@profiles_app.command()
@handle_errors
def add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Unique profile name")],
    platform: Annotated[
        PublishPlatform, typer.Option("--platform", "-p", help="Target platform")
    ],
    api_key: Annotated[
        str | None, typer.Option("--api-key", help="pgyer API key")
    ] = None,
    api_token: Annotated[
        str | None, typer.Option("--api-token", help="fir.im API token")
    ] = None,
    password: Annotated[
        str | None, typer.Option("--password", help="Install password (pgyer)")
    ] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", "-d", help="Default changelog text"),
    ] = None,
    fir_cli_path: Annotated[
        str | None,
        typer.Option("--fir-cli-path", help="Path to go-fir-cli when not on PATH"),
    ] = None,
) -> None:
    """Add a publish profile."""
    profile = PublishProfile(
        name=name,
        platform=platform.value,
        api_key=api_key,
        api_token=api_token,
        password=password,
        default_description=description,
        go_fir_cli_path=fir_cli_path,
    )
    _registry(ctx).add_profile(profile)
    get_themed_console(get_app_context(ctx).icon_mode).print_success(
        f"Profile '{name}' added"
    )


@profiles_app.command()
@handle_errors
def update(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile to update")],
    new_name: Annotated[
        str | None, typer.Option("--name", help="Rename the profile")
    ] = None,
    platform: Annotated[
        PublishPlatform | None,
        typer.Option("--platform", "-p", help="Target platform"),
    ] = None,
    api_key: Annotated[
        str | None, typer.Option("--api-key", help="pgyer API key")
    ] = None,
    api_token: Annotated[
        str | None, typer.Option("--api-token", help="fir.im API token")
    ] = None,
    password: Annotated[
        str | None,
        typer.Option("--password", help="Install password, empty string clears it"),
    ] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", "-d", help="Default changelog text"),
    ] = None,
    fir_cli_path: Annotated[
        str | None,
        typer.Option("--fir-cli-path", help="Path to go-fir-cli when not on PATH"),
    ] = None,
) -> None:
    """Update a publish profile. Only the given fields change."""
    registry = _registry(ctx)
    changes: dict[str, object] = {
        key: value
        for key, value in {
            "name": new_name,
            "platform": platform.value if platform else None,
            "api_key": api_key,
            "api_token": api_token,
            "default_description": description,
            "go_fir_cli_path": fir_cli_path,
        }.items()
        if value is not None
    }
    if password is not None:
        changes["password"] = password or None

    current = registry.get_profile(name)
    updated = current.model_copy(update=changes)
    registry.update_profile(name, PublishProfile.model_validate(updated.to_dict_full()))
    get_themed_console(get_app_context(ctx).icon_mode).print_success(
        f"Profile '{name}' updated"
    )


@profiles_app.command()
@handle_errors
def delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile to delete")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")
    ] = False,
) -> None:
    """Remove a publish profile."""
    if not yes and not typer.confirm(f"Delete profile '{name}'?"):
        raise typer.Abort()
    _registry(ctx).delete_profile(name)
    get_themed_console(get_app_context(ctx).icon_mode).print_success(
        f"Profile '{name}' deleted"
    )


def register_commands(app: typer.Typer) -> None:
    """Register publish profile commands with the main app."""
    app.add_typer(profiles_app, name="profiles")
