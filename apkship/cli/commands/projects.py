"""Project registry commands."""

from pathlib import Path
from typing import Annotated

import typer

from apkship.cli.app import get_app_context
from apkship.cli.decorators import handle_errors
from apkship.cli.helpers.theme import TableStyles, get_themed_console
from apkship.registry import Project, ProjectRegistry, create_project_registry


projects_app = typer.Typer(
    name="projects",
    help="Manage registered Android projects",
    no_args_is_help=True,
)


def _registry(ctx: typer.Context) -> ProjectRegistry:
    return create_project_registry(get_app_context(ctx).user_config)


def _dimension(values: list[str] | None, default: str | None) -> str:
    if values:
        return ", ".join(values)
    return default or "-"


@projects_app.command(name="list")
@handle_errors
def list_projects(ctx: typer.Context) -> None:
    """List registered projects."""
    icon_mode = get_app_context(ctx).icon_mode
    projects = _registry(ctx).list_projects()
    themed = get_themed_console(icon_mode)

    if not projects:
        themed.print_info("No projects registered")
        return

    table = TableStyles.create_project_table(icon_mode)
    for project in projects:
        table.add_row(
            project.name,
            project.path,
            _dimension(project.modules, project.default_module),
            _dimension(project.variants, project.default_variant),
            project.build_type or "-",
        )
    themed.console.print(table)


@projects_app.command()
@handle_errors
def add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Unique project name")],
    path: Annotated[Path, typer.Argument(help="Project root containing gradlew")],
    modules: Annotated[
        list[str] | None,
        typer.Option(
            "--module", "-m", help="Module name (repeatable, first is default)"
        ),
    ] = None,
    variants: Annotated[
        list[str] | None,
        typer.Option("--variant", help="Variant name (repeatable, first is default)"),
    ] = None,
    build_type: Annotated[
        str | None, typer.Option("--build-type", "-b", help="Default build type")
    ] = None,
) -> None:
    """Register a project."""
    project = Project(
        name=name,
        path=str(path.expanduser().absolute()),
        modules=modules or None,
        variants=variants or None,
        build_type=build_type,
    )
    _registry(ctx).add_project(project)
    get_themed_console(get_app_context(ctx).icon_mode).print_success(
        f"Project '{name}' added"
    )


@projects_app.command()
@handle_errors
def update(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Project to update")],
    new_name: Annotated[
        str | None, typer.Option("--name", help="Rename the project")
    ] = None,
    path: Annotated[
        Path | None, typer.Option("--path", help="New project root")
    ] = None,
    modules: Annotated[
        list[str] | None,
        typer.Option("--module", "-m", help="Replace the module list (repeatable)"),
    ] = None,
    variants: Annotated[
        list[str] | None,
        typer.Option("--variant", help="Replace the variant list (repeatable)"),
    ] = None,
    build_type: Annotated[
        str | None, typer.Option("--build-type", "-b", help="Default build type")
    ] = None,
) -> None:
    """Update a registered project. Only the given fields change."""
    registry = _registry(ctx)
    changes: dict[str, object] = {}
    if new_name is not None:
        changes["name"] = new_name
    if path is not None:
        changes["path"] = str(path.expanduser().absolute())
    if modules:
        changes["modules"] = modules
    if variants:
        changes["variants"] = variants
    if build_type is not None:
        changes["build_type"] = build_type

    current = registry.get_project(name)
    updated = current.model_copy(update=changes)
    registry.update_project(name, Project.model_validate(updated.to_dict_full()))
    get_themed_console(get_app_context(ctx).icon_mode).print_success(
        f"Project '{name}' updated"
    )


@projects_app.command()
@handle_errors
def delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Project to delete")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")
    ] = False,
) -> None:
    """Remove a project from the registry."""
    if not yes and not typer.confirm(f"Delete project '{name}'?"):
        raise typer.Abort()
    _registry(ctx).delete_project(name)
    get_themed_console(get_app_context(ctx).icon_mode).print_success(
        f"Project '{name}' deleted"
    )


def register_commands(app: typer.Typer) -> None:
    """Register project commands with the main app."""
    app.add_typer(projects_app, name="projects")
