"""Report rendering exports."""

from monocov.report.markdown import (
    ReportOptions,
    format_diff_cell,
    format_percentage,
    generate_comparison_report,
    generate_coverage_table,
    generate_report,
    generate_summary,
    no_coverage_comment,
)
from monocov.report.terminal import diff_table, snapshot_table

__all__ = [
    "ReportOptions",
    "diff_table",
    "format_diff_cell",
    "format_percentage",
    "generate_comparison_report",
    "generate_coverage_table",
    "generate_report",
    "generate_summary",
    "no_coverage_comment",
    "snapshot_table",
]
