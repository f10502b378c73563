"""Markdown report rendering for pull-request comments.

Consumes snapshots and diffs; never recomputes coverage. All rounding and
significance filtering happens here, so the diff model stays exact.

Output shape:

    ## Coverage Report

    ### Overall Coverage: 87.50%              (include_summary)

    **Coverage Change:** 📈 +1.25% (from 86.25%)

    ### Coverage Changes by Project          (with a baseline)
    | Project | Lines | Functions | Branches | Status |
    ...

    ### Coverage by Project                  (without a baseline)
    | Project | Lines | Functions | Branches |
    ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from monocov.coverage.diff import RemovedPolicy, diff_snapshots
from monocov.coverage.metrics import total_line_coverage
from monocov.coverage.models import (
    AddedProject,
    ModifiedProject,
    ProjectDiff,
    ProjectRecord,
    RemovedProject,
    Summary,
)

NO_CHANGES_ROW = "| *No significant changes* | - | - | - | ✅ |\n"


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Rendering switches."""

    title: str = "Coverage Report"
    hide_coverage_reports: bool = False
    hide_unchanged: bool = False
    include_summary: bool = False
    change_threshold: float = 0.01
    removed: RemovedPolicy = RemovedPolicy.OMIT


def format_percentage(value: float | None) -> str:
    """Two-decimal percentage, or N/A when there is no data.

    Examples:
        85 -> "85.00%"
        None -> "N/A"
    """
    if value is None or value != value:  # NaN
        return "N/A"
    return f"{value:.2f}%"


def format_signed(value: float) -> str:
    """Signed two-decimal number: +1.50, -0.25, 0.00."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.2f}"


def format_diff_cell(current: float | None, delta: float, *, threshold: float = 0.01) -> str:
    """Current value plus a change marker when the change is significant."""
    current_formatted = format_percentage(current)
    if abs(delta) < threshold:
        return current_formatted
    emoji = "📈" if delta > 0 else "📉"
    return f"{current_formatted} ({format_signed(delta)}%) {emoji}"


def generate_summary(
    current: Mapping[str, ProjectRecord],
    base: Mapping[str, ProjectRecord] | None,
) -> str:
    """Overall line coverage and, with a baseline, its change."""
    total = total_line_coverage(current)
    summary = f"### Overall Coverage: {total:.2f}%\n\n"

    if base is not None:
        base_total = total_line_coverage(base)
        diff = total - base_total
        emoji = "📈" if diff > 0 else "📉" if diff < 0 else "➡️"
        summary += (
            f"**Coverage Change:** {emoji} {format_signed(diff)}% (from {base_total:.2f}%)\n\n"
        )

    return summary


def _metric_cells(summary: Summary, suffix: str, *, strike: bool = False) -> list[str]:
    cells = []
    for stat in (summary.lines, summary.functions, summary.branches):
        value = format_percentage(stat.pct)
        cells.append(f"~~{value}~~ {suffix}" if strike else f"{value} {suffix}")
    return cells


def generate_project_row(
    project_id: str, project_diff: ProjectDiff, *, threshold: float = 0.01
) -> str:
    """One comparison table row."""
    if isinstance(project_diff, AddedProject):
        cells = _metric_cells(project_diff.current, "✨")
        status = "🆕 Added"
    elif isinstance(project_diff, RemovedProject):
        cells = _metric_cells(project_diff.base, "❌", strike=True)
        status = "🗑️ Removed"
    else:
        current, delta = project_diff.current, project_diff.delta
        cells = [
            format_diff_cell(current.lines.pct, delta.lines, threshold=threshold),
            format_diff_cell(current.functions.pct, delta.functions, threshold=threshold),
            format_diff_cell(current.branches.pct, delta.branches, threshold=threshold),
        ]
        status = "📊 Changed" if delta.is_significant(threshold) else "➡️ Unchanged"

    return f"| {project_id} | {' | '.join(cells)} | {status} |\n"


def generate_comparison_report(
    diffs: Mapping[str, ProjectDiff],
    *,
    hide_unchanged: bool = False,
    threshold: float = 0.01,
) -> str:
    """Per-project comparison table, sorted by project id."""
    report = "### Coverage Changes by Project\n\n"
    report += "| Project | Lines | Functions | Branches | Status |\n"
    report += "|---------|-------|-----------|----------|--------|\n"

    rows = []
    for project_id in sorted(diffs):
        project_diff = diffs[project_id]
        if (
            hide_unchanged
            and isinstance(project_diff, ModifiedProject)
            and not project_diff.delta.is_significant(threshold)
        ):
            continue
        rows.append(generate_project_row(project_id, project_diff, threshold=threshold))

    report += "".join(rows) if rows else NO_CHANGES_ROW
    return report + "\n"


def generate_coverage_table(snapshot: Mapping[str, ProjectRecord]) -> str:
    """Plain per-project table for runs without a baseline."""
    report = "### Coverage by Project\n\n"
    report += "| Project | Lines | Functions | Branches |\n"
    report += "|---------|-------|-----------|----------|\n"

    for project_id in sorted(snapshot):
        summary = snapshot[project_id].summary
        lines = format_percentage(summary.lines.pct)
        functions = format_percentage(summary.functions.pct)
        branches = format_percentage(summary.branches.pct)
        report += f"| {project_id} | {lines} | {functions} | {branches} |\n"

    return report + "\n"


def generate_report(
    current: Mapping[str, ProjectRecord],
    base: Mapping[str, ProjectRecord] | None = None,
    *,
    options: ReportOptions | None = None,
) -> str:
    """Render the full pull-request comment body."""
    options = options or ReportOptions()
    report = f"## {options.title}\n\n"

    if options.include_summary:
        report += generate_summary(current, base)

    if not options.hide_coverage_reports:
        if base is not None:
            diffs = diff_snapshots(current, base, removed=options.removed)
            report += generate_comparison_report(
                diffs,
                hide_unchanged=options.hide_unchanged,
                threshold=options.change_threshold,
            )
        else:
            report += generate_coverage_table(current)

    return report


def no_coverage_comment(title: str) -> str:
    """Comment body for builds that produced no coverage at all."""
    return f"## {title}\n\n⚠️ No coverage data was generated for this build."
