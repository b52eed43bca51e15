"""tpl infer command - print the targets inferred for a workspace."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from testplane.config.loader import load_config
from testplane.core.errors import InferenceError, TestPlaneError
from testplane.core.logging import configure_logging
from testplane.graph.models import ProjectDescriptor
from testplane.phpunit.plugin import infer_targets


def _projects_to_json(projects: dict[str, ProjectDescriptor]) -> dict[str, Any]:
    return {root: project.to_json_dict() for root, project in sorted(projects.items())}


def _render_table(console: Console, projects: dict[str, ProjectDescriptor]) -> None:
    if not projects:
        console.print("[yellow]No PHPUnit projects found[/yellow]")
        return
    for root, project in sorted(projects.items()):
        table = Table(title=f"{project.name} ({root})", title_justify="left")
        table.add_column("Target", style="cyan")
        table.add_column("Command")
        table.add_column("Outputs")
        for name, target in project.targets.items():
            table.add_row(
                name,
                target.command or target.executor or "",
                "\n".join(target.outputs),
            )
        console.print(table)


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--target-name", default=None, help="Name of the run-all-tests target")
@click.option("--ci-target-name", default=None, help="Name of the per-file CI aggregator target")
@click.option("--no-ci", is_flag=True, help="Do not generate per-file CI targets")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def infer_command(
    ctx: click.Context,
    path: Path,
    target_name: str | None,
    ci_target_name: str | None,
    no_ci: bool,
    as_json: bool,
) -> None:
    """Infer PHPUnit targets for every phpunit.xml in a workspace.

    PATH is the workspace root (default: current directory).
    """
    workspace_root = path.resolve()
    overrides: dict[str, Any] = {}
    if target_name:
        overrides["target_name"] = target_name
    if ci_target_name:
        overrides["ci_target_name"] = ci_target_name
    if no_ci:
        overrides["ci_target_name"] = None

    try:
        config = load_config(workspace_root)
        # -v on the group wins over the configured outputs
        if not (ctx.obj or {}).get("verbose"):
            configure_logging(config=config.logging)
        if overrides:
            phpunit = config.phpunit.model_copy(update=overrides)
            config = config.model_copy(update={"phpunit": phpunit})
        projects = infer_targets(workspace_root, config)
    except InferenceError as e:
        console = Console(stderr=True)
        for config_file, error in e.failures:
            console.print(f"[red]✗[/red] {config_file}: {error}")
        if as_json:
            click.echo(json.dumps(_projects_to_json(e.partial_results), indent=2))
        raise click.ClickException(e.message) from e
    except TestPlaneError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(_projects_to_json(projects), indent=2))
        return
    _render_table(Console(), projects)
