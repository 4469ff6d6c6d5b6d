"""symdex index command - write a SCIP-shaped JSON index."""

from pathlib import Path

import click

from symdex.cli.utils import load_cli_config
from symdex.core.errors import SymdexError
from symdex.core.progress import pluralize, status
from symdex.index.ops import index_dump
from symdex.index.scip import index_to_dict, write_index_json

DEFAULT_OUTPUT_NAME = "index.scip.json"


@click.command()
@click.argument("dump", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Output file (default: {DEFAULT_OUTPUT_NAME} next to DUMP)",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Files indexed concurrently (overrides indexer.max_workers)",
)
@click.option(
    "--root",
    "project_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Resolve packages from package.json files under this directory "
    "instead of the dump's package entries",
)
@click.pass_context
def index_command(
    ctx: click.Context,
    dump: Path,
    output: Path | None,
    workers: int | None,
    project_root: Path | None,
) -> None:
    """Index a semantic dump.

    DUMP is the JSON file written by a semantic resolver. Exits with status 1
    if any file failed to index; the other files are still written.
    """
    overrides = {"indexer": {"max_workers": workers}} if workers is not None else {}
    config = load_cli_config(ctx, project_root, **overrides)

    try:
        _, result = index_dump(dump, config=config, project_root=project_root)
    except SymdexError as e:
        raise click.ClickException(str(e)) from e

    output = output or dump.parent / DEFAULT_OUTPUT_NAME
    index = index_to_dict(
        result.documents,
        project_root=project_root or dump.parent,
        arguments=["index", str(dump)],
    )
    size = write_index_json(output, index)

    status(
        f"Indexed {pluralize(len(result.documents), 'document')}, "
        f"{pluralize(result.occurrence_count, 'occurrence')}, "
        f"{pluralize(result.symbol_count, 'symbol')} in {result.duration_ms}ms",
        style="success",
    )
    status(f"Wrote {output} ({size:,} bytes)")

    for failure in result.failures:
        status(f"{failure.path}: {failure.error.message}", style="error")
    if not result.success:
        status(f"{pluralize(len(result.failures), 'file')} failed", style="warning")
        ctx.exit(1)
