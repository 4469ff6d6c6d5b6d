"""symdex CLI - symdex command."""

import click

from symdex.cli.index import index_command
from symdex.cli.snapshot import snapshot_command
from symdex.config.constants import TOOL_VERSION
from symdex.core.logging import configure_logging


@click.group()
@click.version_option(version=TOOL_VERSION, prog_name="symdex")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """symdex - SCIP symbol naming and occurrence emission."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(index_command, name="index")
cli.add_command(snapshot_command, name="snapshot")


if __name__ == "__main__":
    cli()
