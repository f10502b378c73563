"""Tests for merging records that share a project id."""

import itertools

import pytest

from monocov.coverage.merge import merge_project_records
from monocov.coverage.models import LcovCounter, LcovFileRecord, MetricStat, ProjectRecord, Summary


def _summary_record(summary: Summary) -> ProjectRecord:
    return ProjectRecord(path="p", summary=summary, source_formats=frozenset({"json-summary"}))


def _lcov_record(summary: Summary, file: str = "a.js") -> ProjectRecord:
    detail = (LcovFileRecord(file=file, lines=LcovCounter(found=1, hit=1)),)
    return ProjectRecord(
        path="p", summary=summary, raw_detail=detail, source_formats=frozenset({"lcov"})
    )


class TestMergeProjectRecords:
    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            merge_project_records([])

    def test_single_record_unchanged(self) -> None:
        record = _summary_record(Summary(lines=MetricStat.from_counts(1, 2)))
        assert merge_project_records([record]) is record

    def test_json_summary_wins_per_metric(self) -> None:
        summary = _summary_record(
            Summary(
                lines=MetricStat.from_counts(9, 10),
                statements=MetricStat.from_counts(8, 10),
            )
        )
        lcov = _lcov_record(
            Summary(
                lines=MetricStat.from_counts(1, 10),
                functions=MetricStat.from_counts(3, 4),
                statements=MetricStat.from_counts(1, 10),
            )
        )

        merged = merge_project_records([lcov, summary])

        assert merged.summary.lines.pct == 90.0
        assert merged.summary.statements is not None
        assert merged.summary.statements.pct == 80.0
        # Gap filled from LCOV
        assert merged.summary.functions.pct == 75.0

    def test_raw_detail_survives(self) -> None:
        merged = merge_project_records(
            [_summary_record(Summary()), _lcov_record(Summary(), file="x.js")]
        )

        assert merged.raw_detail is not None
        assert [r.file for r in merged.raw_detail] == ["x.js"]
        assert merged.source_formats == frozenset({"json-summary", "lcov"})

    def test_merge_is_non_destructive(self) -> None:
        """Every metric with data in any input keeps data after the merge."""
        summary = _summary_record(Summary(branches=MetricStat.from_counts(1, 2)))
        lcov = _lcov_record(
            Summary(lines=MetricStat.from_counts(1, 2), functions=MetricStat.from_counts(2, 2))
        )

        merged = merge_project_records([summary, lcov]).summary

        assert merged.lines.has_data
        assert merged.functions.has_data
        assert merged.branches.has_data

    def test_same_format_pools_counts(self) -> None:
        a = _lcov_record(Summary(lines=MetricStat.from_counts(10, 10)), file="a.js")
        b = _lcov_record(Summary(lines=MetricStat.from_counts(0, 30)), file="b.js")

        merged = merge_project_records([a, b])

        assert merged.summary.lines == MetricStat(total=40, covered=10, pct=25.0)
        assert merged.raw_detail is not None
        assert [r.file for r in merged.raw_detail] == ["a.js", "b.js"]

    def test_order_independent(self) -> None:
        records = [
            _summary_record(Summary(lines=MetricStat.from_counts(5, 10))),
            _lcov_record(Summary(functions=MetricStat.from_counts(1, 3)), file="b.js"),
            _lcov_record(Summary(lines=MetricStat.from_counts(2, 2)), file="a.js"),
        ]

        results = {merge_project_records(list(p)) for p in itertools.permutations(records)}

        assert len(results) == 1
