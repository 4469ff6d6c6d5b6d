"""symdex snapshot command - print the annotated source of one file."""

from pathlib import Path

import click

from symdex.cli.utils import load_cli_config
from symdex.core.errors import SymdexError
from symdex.index.ops import index_dump
from symdex.index.snapshot import format_snapshot


@click.command()
@click.argument("dump", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("file")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the snapshot to a file instead of stdout",
)
@click.pass_context
def snapshot_command(ctx: click.Context, dump: Path, file: str, output: Path | None) -> None:
    """Print the snapshot of FILE.

    The whole DUMP is indexed so cross-file symbols resolve the same way they
    do in `symdex index`. FILE is a path as listed in the dump.
    """
    config = load_cli_config(ctx, None)

    try:
        loaded, result = index_dump(dump, config=config)
    except SymdexError as e:
        raise click.ClickException(str(e)) from e

    loaded_file = loaded.by_path.get(file)
    if loaded_file is None:
        raise click.ClickException(f"{file} is not in {dump}")
    if loaded_file.text is None:
        raise click.ClickException(f"{dump} has no source text for {file}")

    document = next((doc for doc in result.documents if doc.relative_path == file), None)
    if document is None:
        failure = next(f for f in result.failures if f.path == file)
        raise click.ClickException(f"{file} failed to index: {failure.error}")

    try:
        text = format_snapshot(
            loaded_file.lines,
            document,
            strip_prefix=f"{config.index.scheme} {config.index.manager} ",
        )
    except ValueError as e:
        raise click.ClickException(f"{file}: {e}") from e

    if output is None:
        click.echo(text, nl=False)
    else:
        output.write_text(text)
