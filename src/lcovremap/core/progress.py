"""Terminal feedback for the CLI.

stdout may carry the remapped LCOV, so everything here writes to stderr
through one rich console. While a spinner runs, console log handlers are
muted for every thread: map loading happens in worker threads and their
log lines would otherwise tear the spinner line.

Usage::

    with spinner("Remapping coverage"):
        records = remap_everything()
    status(f"Wrote {pluralize(records, 'record')}", style="success")
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_suppress_lock = threading.Lock()
_suppress_depth = 0


def is_console_suppressed() -> bool:
    return _suppress_depth > 0


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Mute console log handlers (file handlers keep logging). Nests."""
    global _suppress_depth
    with _suppress_lock:
        _suppress_depth += 1
    try:
        yield
    finally:
        with _suppress_lock:
            _suppress_depth -= 1


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one styled line to stderr."""
    _console.print(f"{' ' * indent}{_STYLES.get(style, '')}{message}", highlight=False)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """``pluralize(1, "record")`` -> "1 record", ``pluralize(3, "record")`` -> "3 records"."""
    word = singular if count == 1 else (plural or singular + "s")
    return f"{count} {word}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Show a spinner on a TTY; print nothing otherwise (CI logs, pipes)."""
    if not _is_tty():
        yield
        return

    with (
        suppress_console_logs(),
        _console.status(f"{' ' * indent}[cyan]{message}[/cyan]", spinner="dots"),
    ):
        yield
