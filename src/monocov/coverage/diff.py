"""Snapshot comparison.

Classifies every project of the current snapshot as added or modified
against a baseline and computes percentage-point deltas. Pure: no I/O, no
rounding, no ordering guarantees. Display concerns (rounding, sorting,
significance thresholds) belong to the renderer.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from monocov.coverage.models import (
    AddedProject,
    MetricDelta,
    ModifiedProject,
    ProjectDiff,
    ProjectRecord,
    RemovedProject,
    Summary,
)


class RemovedPolicy(str, Enum):
    """What to do with projects that only exist in the baseline.

    OMIT (default) keeps reviewers from reading deleted code as a coverage
    regression. REPORT keeps removed test surface visible.
    """

    OMIT = "omit"
    REPORT = "report"


def compute_delta(current: Summary, base: Summary) -> MetricDelta:
    """current - base per metric, in percentage points.

    Missing percentages count as 0 here. Statements fall back to the lines
    delta unless both sides report statements.
    """
    lines = current.lines.pct_for_delta - base.lines.pct_for_delta

    if (
        current.statements is not None
        and base.statements is not None
        and current.statements.has_data
        and base.statements.has_data
    ):
        statements = current.statements.pct_for_delta - base.statements.pct_for_delta
    else:
        statements = lines

    return MetricDelta(
        lines=lines,
        functions=current.functions.pct_for_delta - base.functions.pct_for_delta,
        branches=current.branches.pct_for_delta - base.branches.pct_for_delta,
        statements=statements,
    )


def diff_snapshots(
    current: Mapping[str, ProjectRecord],
    base: Mapping[str, ProjectRecord] | None = None,
    *,
    removed: RemovedPolicy = RemovedPolicy.OMIT,
) -> dict[str, ProjectDiff]:
    """Compare two snapshots project by project.

    Args:
        current: Snapshot of the run under review.
        base: Baseline snapshot; None is treated as empty.
        removed: Policy for projects present only in base.

    Returns:
        ProjectId -> AddedProject | ModifiedProject (| RemovedProject).
    """
    base = base or {}
    result: dict[str, ProjectDiff] = {}

    for project_id, record in current.items():
        base_record = base.get(project_id)
        if base_record is None:
            result[project_id] = AddedProject(current=record.summary)
        else:
            result[project_id] = ModifiedProject(
                current=record.summary,
                base=base_record.summary,
                delta=compute_delta(record.summary, base_record.summary),
            )

    if removed is RemovedPolicy.REPORT:
        for project_id, base_record in base.items():
            if project_id not in current:
                result[project_id] = RemovedProject(base=base_record.summary)

    return result
