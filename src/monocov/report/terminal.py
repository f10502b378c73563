"""Rich tables for terminal display of snapshots and diffs."""

from __future__ import annotations

from collections.abc import Mapping

from rich.table import Table
from rich.text import Text

from monocov.coverage.models import (
    AddedProject,
    ProjectDiff,
    ProjectRecord,
    RemovedProject,
)
from monocov.report.markdown import format_percentage, format_signed


def _delta_text(delta: float, threshold: float) -> Text:
    if abs(delta) < threshold:
        return Text("±0.00", style="dim")
    return Text(format_signed(delta), style="green" if delta > 0 else "red")


def snapshot_table(snapshot: Mapping[str, ProjectRecord]) -> Table:
    """Create a Rich Table listing every project's coverage.

    Args:
        snapshot: Aggregated coverage.

    Returns:
        Rich Table ready to print.
    """
    table = Table(box=None, padding=(0, 1), pad_edge=False)
    table.add_column("Project", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Functions", justify="right")
    table.add_column("Branches", justify="right")
    table.add_column("Statements", justify="right")
    table.add_column("Formats", style="dim")

    for project_id in sorted(snapshot):
        record = snapshot[project_id]
        summary = record.summary
        statements = summary.statements.pct if summary.statements is not None else None
        table.add_row(
            project_id,
            format_percentage(summary.lines.pct),
            format_percentage(summary.functions.pct),
            format_percentage(summary.branches.pct),
            format_percentage(statements),
            ", ".join(sorted(record.source_formats)),
        )

    return table


def diff_table(diffs: Mapping[str, ProjectDiff], *, threshold: float = 0.01) -> Table:
    """Create a Rich Table of per-project changes."""
    table = Table(box=None, padding=(0, 1), pad_edge=False)
    table.add_column("Project", style="cyan")
    table.add_column("Status")
    table.add_column("Lines", justify="right")
    table.add_column("Functions", justify="right")
    table.add_column("Branches", justify="right")
    table.add_column("Statements", justify="right")

    for project_id in sorted(diffs):
        project_diff = diffs[project_id]
        if isinstance(project_diff, AddedProject):
            s = project_diff.current
            table.add_row(
                project_id,
                Text("added", style="green"),
                format_percentage(s.lines.pct),
                format_percentage(s.functions.pct),
                format_percentage(s.branches.pct),
                "",
            )
        elif isinstance(project_diff, RemovedProject):
            s = project_diff.base
            table.add_row(
                project_id,
                Text("removed", style="red"),
                format_percentage(s.lines.pct),
                format_percentage(s.functions.pct),
                format_percentage(s.branches.pct),
                "",
            )
        else:
            d = project_diff.delta
            table.add_row(
                project_id,
                Text("modified", style="yellow"),
                _delta_text(d.lines, threshold),
                _delta_text(d.functions, threshold),
                _delta_text(d.branches, threshold),
                _delta_text(d.statements, threshold),
            )

    return table
