"""Percentage arithmetic shared by parsers, merging, and totals."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from monocov.coverage.models import ProjectRecord


def percentage(covered: int, total: int) -> float | None:
    """Covered share of total in percent, or None when there is nothing to cover.

    Examples:
        percentage(45, 50) -> 90.0
        percentage(0, 0) -> None
    """
    if total <= 0:
        return None
    return covered / total * 100.0


def total_line_coverage(snapshot: Mapping[str, ProjectRecord]) -> float:
    """Line coverage across every project, weighted by line count.

    Projects whose line counts are unknown contribute nothing. Returns 0.0
    for a snapshot with no counted lines.
    """
    total = sum(record.summary.lines.total for record in snapshot.values())
    covered = sum(record.summary.lines.covered for record in snapshot.values())
    return percentage(covered, total) or 0.0
