"""Structured logging for remap runs.

structlog renders through stdlib logging so several outputs (console, JSON
files) can each have their own level. Every event logged inside a
``run_context()`` carries the ``run_id`` of that run. Console handlers go
quiet while a rich spinner owns the terminal.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from lcovremap.core.progress import is_console_suppressed

if TYPE_CHECKING:
    from lcovremap.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

_CONSOLE_DESTINATIONS = frozenset({"stderr", "stdout"})


def get_run_id() -> str | None:
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate the run correlation ID."""
    rid = run_id or uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def clear_run_id() -> None:
    _run_id.set(None)


@contextmanager
def run_context(run_id: str | None = None) -> Iterator[str]:
    """Tag every event logged inside the block with one run ID."""
    rid = set_run_id(run_id)
    try:
        yield rid
    finally:
        clear_run_id()


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_run_id():
        event_dict["run_id"] = rid
    return event_dict


def _to_level(name: str | None, default: int) -> int:
    if name is None:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


class ConsoleSuppressingFilter(logging.Filter):
    """Blocks console output while a spinner is live.

    Only stderr/stdout handlers carry this filter; file outputs keep
    receiving everything.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        return not is_console_suppressed()


def _make_handler(destination: str) -> logging.Handler:
    if destination in _CONSOLE_DESTINATIONS:
        # looked up now, not at import, so a swapped sys.stderr is honoured
        handler: logging.Handler = logging.StreamHandler(getattr(sys, destination))
        handler.addFilter(ConsoleSuppressingFilter())
        return handler

    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _make_formatter(
    output: LogOutputConfig,
    shared_processors: list[structlog.types.Processor],
) -> logging.Formatter:
    renderer: structlog.types.Processor
    match output.format:
        case "json":
            renderer = structlog.processors.JSONRenderer()
        case _:
            colors = output.destination in _CONSOLE_DESTINATIONS and sys.stderr.isatty()
            renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0)
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Configure structlog. Pass config for multi-output, or use simple params.

    Args:
        config: Logging configuration with outputs; wins over the other args
        json_format: Render JSON instead of console lines (simple setup)
        level: Root level (simple setup)
    """
    from lcovremap.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _to_level(config.level, logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Don't cache - allows reconfiguration and respects level changes
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    # asyncio reports slow to_thread callbacks at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    for output in config.outputs:
        handler = _make_handler(output.destination)
        handler.setLevel(_to_level(output.level, root_level))
        handler.setFormatter(_make_formatter(output, shared_processors))
        root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    # Initial values keep the proxy lazy; bind() would freeze the config in
    # effect at import time.
    if name:
        return structlog.get_logger(logger=name)  # type: ignore[no-any-return]
    return structlog.get_logger()  # type: ignore[no-any-return]
