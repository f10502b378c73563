"""User-facing terminal output for CLI commands.

Status lines and error reports go to stderr through one Rich console, so
stdout stays clean for ``--json`` output and workflow commands.

Usage::

    from monocov.core.console import report_error, status

    status("Aggregating coverage...")
    status("Report posted", style="success")  # ✓ Report posted
    report_error(err)  # ✗ No coverage data found in coverage  [COVERAGE_NO_DATA]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from monocov.core.errors import MonoCovError

_console = Console(stderr=True)

_MARKERS = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _log() -> BoundLogger:
    # Resolved per call so reconfiguration after config load applies
    from monocov.core.logging import get_logger

    return get_logger("console")


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one marked status line to stderr."""
    marker = _MARKERS.get(style, "")
    _console.print(f"{' ' * indent}{marker}{escape(message)}", highlight=False)
    _log().debug("status", message=message, style=style)


def report_error(error: MonoCovError) -> None:
    """Print a MonoCovError with its code name and the artifact or field involved."""
    status(f"{error.message}  [{error.error_name}]", style="error")
    for key in ("path", "field", "status_code"):
        value = error.details.get(key)
        if value is not None:
            _console.print(f"    [dim]{key}: {escape(str(value))}[/dim]", highlight=False)
    if error.retryable:
        _console.print("    [dim]retrying may succeed[/dim]", highlight=False)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Examples:
        pluralize(1, "artifact") -> "1 artifact"
        pluralize(3, "project") -> "3 projects"
    """
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"
