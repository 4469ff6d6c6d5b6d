"""CLI utilities."""

from pathlib import Path

import click

from symdex.config.loader import load_config
from symdex.config.models import SymdexConfig
from symdex.core.errors import ConfigError
from symdex.core.logging import configure_logging


def load_cli_config(
    ctx: click.Context, project_root: Path | None, **overrides: object
) -> SymdexConfig:
    """Load config for a command and apply its logging section.

    --verbose keeps the debug console logging set up by the group.

    Raises:
        click.ClickException: If the configuration is invalid.
    """
    try:
        config = load_config(project_root, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if not (ctx.obj or {}).get("verbose"):
        configure_logging(config=config.logging)
    return config
