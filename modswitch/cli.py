"""Command-line interface for modswitch."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .api import CatalogError, CatalogRateLimited, MissingAPIKey
from .config import Settings
from .installer import InstallError
from .logging_config import configure_logging
from .selector import ConsoleFileSelector
from .service import ModSwitchService
from .state import StateError

console = Console()


def _service(ctx: click.Context, interactive: bool = False) -> ModSwitchService:
    settings: Settings = ctx.obj["settings"]
    service = ModSwitchService(settings)
    if interactive:
        service.selector = ConsoleFileSelector(
            catalog=service.api,
            installer=service.installer(show_progress=True),
            restrictions_disabled=settings.disable_add_mod_restrictions,
            console=console,
        )
    return service


def _fail(message: str, hint: str | None = None) -> None:
    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(hint)
    sys.exit(1)


def _catalog_failure(e: CatalogError) -> None:
    if isinstance(e, MissingAPIKey):
        _fail(str(e))
    if isinstance(e, CatalogRateLimited):
        _fail(str(e), f"Try again in {e.retry_after} seconds.")
    _fail(f"Catalog error: {e}", "Check your connection and try again.")


@click.group()
@click.option(
    "--api-key",
    envvar="CURSEFORGE_API_KEY",
    help="Catalog API key (or set CURSEFORGE_API_KEY env var)",
)
@click.option("-v", "--verbose", count=True, help="Show more log output (-vv for debug)")
@click.pass_context
def main(ctx: click.Context, api_key: str | None, verbose: int) -> None:
    """Enable, disable and update the add-ons of an instance."""
    ctx.ensure_object(dict)
    settings = Settings.from_env(api_key=api_key)
    if verbose:
        settings.log_level = "DEBUG" if verbose > 1 else "INFO"
    configure_logging(settings.log_level)
    ctx.obj["settings"] = settings


@main.command(name="list")
@click.argument("instance_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def list_mods(ctx: click.Context, instance_dir: Path) -> None:
    """
    List the add-ons of an instance.

    INSTANCE_DIR: Instance directory containing instance.json
    """
    try:
        mods = _service(ctx).list_mods(instance_dir)
    except StateError as e:
        _fail(str(e))

    if not mods:
        console.print("[yellow]No add-ons installed.[/yellow]")
        return

    table = Table(title="Add-ons")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Type")
    table.add_column("File")
    table.add_column("State")

    for mod in mods:
        if not mod.exists:
            state = "[red]missing[/red]"
        elif mod.disabled:
            state = "[yellow]disabled[/yellow]"
        else:
            state = "[green]enabled[/green]"
        table.add_row(mod.name, mod.version, mod.type, mod.file, state)

    console.print(table)


@main.command()
@click.argument("instance_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("file")
@click.pass_context
def enable(ctx: click.Context, instance_dir: Path, file: str) -> None:
    """
    Enable a disabled add-on.

    FILE: File name of the add-on, as listed by 'list'
    """
    try:
        result = _service(ctx).enable_mod(instance_dir, file)
    except StateError as e:
        _fail(str(e))

    if not result.success:
        if not result.disabled:
            console.print(f"[yellow]{result.name} is already enabled.[/yellow]")
            return
        _fail(f"Could not enable {result.name}.")
    console.print(f"[green]Enabled[/green] {result.name}")


@main.command()
@click.argument("instance_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("file")
@click.pass_context
def disable(ctx: click.Context, instance_dir: Path, file: str) -> None:
    """
    Disable an add-on by moving it to disabledmods/.

    FILE: File name of the add-on, as listed by 'list'
    """
    try:
        result = _service(ctx).disable_mod(instance_dir, file)
    except StateError as e:
        _fail(str(e))

    if not result.success:
        if result.disabled:
            console.print(f"[yellow]{result.name} is already disabled.[/yellow]")
            return
        _fail(f"Could not disable {result.name}.")
    console.print(f"[green]Disabled[/green] {result.name}")


@main.command(name="check-updates")
@click.argument("instance_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("file", required=False)
@click.pass_context
def check_updates(ctx: click.Context, instance_dir: Path, file: str | None) -> None:
    """
    Check the catalog for newer files and offer to install them.

    FILE: Only check this add-on (default: every catalog add-on)
    """
    try:
        service = _service(ctx, interactive=True)
        if file:
            results = [service.check_for_update(instance_dir, file)]
        else:
            results = service.check_all_updates(instance_dir)
    except StateError as e:
        _fail(str(e))
    except CatalogError as e:
        _catalog_failure(e)
    except InstallError as e:
        _fail(str(e))

    if not results:
        console.print("[yellow]No add-ons from the catalog.[/yellow]")
        return

    for result in results:
        if result.error:
            console.print(f"[yellow]Could not check {result.name}:[/yellow] {result.error}")
        elif not result.update_available:
            console.print(f"[dim]{result.name} is up to date.[/dim]")

    if any(r.retryable for r in results):
        console.print("Re-run 'check-updates' to retry the failed add-ons.")


@main.command()
@click.argument("instance_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("file")
@click.pass_context
def reinstall(ctx: click.Context, instance_dir: Path, file: str) -> None:
    """
    Pick any catalog file of an add-on and install it in place.

    FILE: File name of the add-on, as listed by 'list'
    """
    try:
        _service(ctx, interactive=True).reinstall(instance_dir, file)
    except StateError as e:
        _fail(str(e))
    except CatalogError as e:
        _catalog_failure(e)
    except InstallError as e:
        _fail(str(e))


@main.command()
@click.argument("instance_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("file")
@click.pass_context
def hydrate(ctx: click.Context, instance_dir: Path, file: str) -> None:
    """
    Refresh cached catalog metadata for an add-on.

    FILE: File name of the add-on, as listed by 'list'
    """
    try:
        mod = _service(ctx).hydrate(instance_dir, file)
    except StateError as e:
        _fail(str(e))
    except CatalogError as e:
        _catalog_failure(e)

    console.print(f"[bold]Mod:[/bold] {mod.remote_mod.name} ({mod.remote_mod_id})")
    console.print(
        f"[bold]File:[/bold] {mod.remote_file.display_name} ({mod.remote_file_id})"
    )


@main.command()
@click.argument("instance_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--port", type=int, default=5000, help="Port (default 5000)")
@click.pass_context
def web(ctx: click.Context, instance_dir: Path, port: int) -> None:
    """
    Serve the JSON API for an instance on localhost.

    INSTANCE_DIR: Instance directory containing instance.json
    """
    from .web import create_and_run

    create_and_run(ctx.obj["settings"], instance_dir, port=port)


if __name__ == "__main__":
    main()
