"""Structured logging for indexing runs.

structlog events are rendered by stdlib handlers, one per configured output
(stderr, stdout or an absolute file path), each with its own format and level.
Every event of an indexing run carries that run's ``run_id``; worker threads
inherit it through a copied context. Console outputs go quiet while a rich
progress bar is on screen; file outputs keep everything.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from symdex.config.models import LoggingConfig, LogOutputConfig

RUN_ID_KEY = "run_id"


def set_run_id(run_id: str | None = None) -> str:
    """Bind the run id to the current context, generating one if omitted."""
    run_id = run_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(**{RUN_ID_KEY: run_id})
    return run_id


def get_run_id() -> str | None:
    run_id: str | None = structlog.contextvars.get_contextvars().get(RUN_ID_KEY)
    return run_id


class ConsoleSuppressingFilter(logging.Filter):
    """Drops console records while a progress bar owns the terminal."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from symdex.core.progress import is_console_suppressed

        return not is_console_suppressed()


_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
]


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog through stdlib handlers built from ``config``.

    Without a config, a single stderr output in the given format and level is
    used. Calling this again replaces every handler.
    """
    from symdex.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = logging.getLevelNamesMapping()[config.level]

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must follow later reconfiguration
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            handler.close()
    root_logger.setLevel(root_level)
    for output in config.outputs:
        root_logger.addHandler(_output_handler(output, output.level or config.level))


def _output_handler(output: LogOutputConfig, level: str) -> logging.Handler:
    handler: logging.Handler
    console = output.destination in ("stderr", "stdout")
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    handler.setLevel(level)
    if console:
        handler.addFilter(ConsoleSuppressingFilter())
    return handler


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Lazy logger named ``name``; follows configuration made after import."""
    if name:
        return structlog.get_logger(name)  # type: ignore[no-any-return]
    return structlog.get_logger()  # type: ignore[no-any-return]
