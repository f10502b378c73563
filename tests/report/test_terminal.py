"""Tests for rich terminal tables."""

from io import StringIO

from rich.console import Console
from rich.table import Table

from monocov.coverage.models import (
    AddedProject,
    MetricDelta,
    MetricStat,
    ModifiedProject,
    ProjectRecord,
    RemovedProject,
    Summary,
)
from monocov.report.terminal import diff_table, snapshot_table


def _render(table: Table) -> str:
    console = Console(file=StringIO(), width=120, color_system=None)
    console.print(table)
    output = console.file.getvalue()  # type: ignore[attr-defined]
    assert isinstance(output, str)
    return output


class TestSnapshotTable:
    def test_lists_projects_sorted(self) -> None:
        snapshot = {
            "b": ProjectRecord(
                path="b",
                summary=Summary(lines=MetricStat.from_counts(1, 2)),
                source_formats=frozenset({"lcov"}),
            ),
            "a": ProjectRecord(path="a", summary=Summary()),
        }

        table = snapshot_table(snapshot)
        output = _render(table)

        assert table.row_count == 2
        assert output.index("a ") < output.index("b ")
        assert "50.00%" in output
        assert "N/A" in output
        assert "lcov" in output


class TestDiffTable:
    def test_statuses(self) -> None:
        summary = Summary(lines=MetricStat(pct=80.0))
        diffs = {
            "added": AddedProject(current=summary),
            "removed": RemovedProject(base=summary),
            "changed": ModifiedProject(
                current=summary,
                base=summary,
                delta=MetricDelta(lines=2.5, functions=-1.0, branches=0.0, statements=2.5),
            ),
        }

        output = _render(diff_table(diffs))  # type: ignore[arg-type]

        assert "added" in output
        assert "removed" in output
        assert "modified" in output
        assert "+2.50" in output
        assert "-1.00" in output
        assert "±0.00" in output
