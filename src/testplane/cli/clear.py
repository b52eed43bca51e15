"""tpl cache-clear command - remove memoized targets for a workspace."""

from pathlib import Path

import click
import questionary
from rich.console import Console

from testplane.config.loader import get_workspace_data_directory, load_config
from testplane.core.errors import TestPlaneError


def clear_targets_cache(workspace_root: Path, *, yes: bool = False) -> int:
    """Delete persisted memoization stores.

    Returns the number of files removed (0 if nothing to clear or cancelled).
    """
    console = Console(stderr=True)
    data_dir = get_workspace_data_directory(workspace_root, load_config(workspace_root))
    cache_files = sorted(data_dir.glob("*.hash")) if data_dir.is_dir() else []

    if not cache_files:
        console.print("[yellow]Nothing to clear[/yellow] - no memoized targets found")
        return 0

    console.print("\n[bold]The following will be deleted:[/bold]\n")
    for cache_file in cache_files:
        console.print(f"  [cyan]•[/cyan] {cache_file}")
    console.print()

    if not yes:
        answer = questionary.confirm("Delete memoized targets?", default=False).ask()
        if not answer:
            console.print("Cancelled")
            return 0

    for cache_file in cache_files:
        cache_file.unlink(missing_ok=True)
    console.print(f"[green]✓[/green] Removed {len(cache_files)} file(s)")
    return len(cache_files)


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
def cache_clear_command(path: Path, yes: bool) -> None:
    """Remove memoized targets so the next inference recomputes everything.

    PATH is the workspace root (default: current directory).
    """
    try:
        clear_targets_cache(path.resolve(), yes=yes)
    except TestPlaneError as e:
        raise click.ClickException(str(e)) from e
