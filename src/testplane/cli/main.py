"""TestPlane CLI - tpl command."""

import click

from testplane import __version__
from testplane.cli.clear import cache_clear_command
from testplane.cli.infer import infer_command
from testplane.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="tpl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TestPlane - infer build targets from PHPUnit configuration."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(infer_command, name="infer")
cli.add_command(cache_clear_command, name="cache-clear")


if __name__ == "__main__":
    cli()
