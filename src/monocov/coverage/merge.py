"""Merging of per-artifact records that resolve to the same project id.

Two situations put several records under one id:

- Different formats for the same project (e.g. a json-summary next to an
  lcov.info). These merge metric by metric: the higher-precedence format's
  metric is kept when it has data, lower-precedence formats fill the gaps.
  Per-file LCOV detail is carried over untouched.
- Several artifacts of the same format (e.g. nested packages rolled up by a
  depth naming policy). These pool their counts and recompute percentages.

Both steps depend only on the set of records, never on discovery or
completion order.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import reduce

from monocov.coverage.models import LcovFileRecord, ProjectRecord, Summary

# Formats earlier in this tuple win metric-by-metric merges
FORMAT_PRECEDENCE: tuple[str, ...] = ("json-summary", "lcov")


def _precedence(format_id: str) -> tuple[int, str]:
    try:
        return FORMAT_PRECEDENCE.index(format_id), format_id
    except ValueError:
        return len(FORMAT_PRECEDENCE), format_id


def _format_of(record: ProjectRecord) -> str:
    # Records built from a single artifact carry exactly one format
    return min(record.source_formats, key=_precedence) if record.source_formats else ""


def merge_project_records(records: Iterable[ProjectRecord]) -> ProjectRecord:
    """Merge records sharing one project id into a single record.

    Args:
        records: Records to merge (must share the same path).

    Returns:
        One record whose summary reflects every input format.
    """
    records_list = list(records)
    if not records_list:
        raise ValueError("Cannot merge empty project record list")
    if len(records_list) == 1:
        return records_list[0]

    path = records_list[0].path

    by_format: dict[str, list[ProjectRecord]] = {}
    for record in records_list:
        by_format.setdefault(_format_of(record), []).append(record)

    # Pool same-format records, then layer formats by precedence
    pooled: list[Summary] = [
        reduce(Summary.combine, (r.summary for r in by_format[fmt]))
        for fmt in sorted(by_format, key=_precedence)
    ]
    summary = reduce(Summary.fill_from, pooled)

    detail: list[LcovFileRecord] = []
    for record in records_list:
        if record.raw_detail:
            detail.extend(record.raw_detail)
    detail.sort(key=lambda r: r.file)

    return ProjectRecord(
        path=path,
        summary=summary,
        raw_detail=tuple(detail) if detail else None,
        source_formats=frozenset().union(*(r.source_formats for r in records_list)),
    )
