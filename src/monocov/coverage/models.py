"""Unified coverage summary model.

Project-centric model: every supported artifact format converts to one
Summary per project, and comparisons operate on Summaries only. Per-file
detail is carried alongside (ProjectRecord.raw_detail) for formats that
provide it but is never needed for diffing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from monocov.coverage.metrics import percentage

METRIC_NAMES: tuple[str, ...] = ("lines", "functions", "branches", "statements")

# Project id used for artifacts sitting directly in the coverage root
ROOT_PROJECT_ID = "root"


@dataclass(frozen=True, slots=True)
class MetricStat:
    """One coverage dimension (lines, functions, branches or statements).

    ``pct is None`` means "no data" (nothing to cover, or the producer did not
    report it). Display must render it as N/A; only delta arithmetic may read
    it as zero, through ``pct_for_delta``.
    """

    total: int = 0
    covered: int = 0
    pct: float | None = None

    def __post_init__(self) -> None:
        if self.total < 0 or self.covered < 0:
            raise ValueError(f"negative coverage counts: {self.covered}/{self.total}")
        if self.covered > self.total:
            raise ValueError(f"covered exceeds total: {self.covered}/{self.total}")
        if self.pct is not None and (math.isnan(self.pct) or not 0.0 <= self.pct <= 100.0):
            raise ValueError(f"pct out of range: {self.pct}")

    @classmethod
    def from_counts(cls, covered: int, total: int) -> MetricStat:
        return cls(total=total, covered=covered, pct=percentage(covered, total))

    @property
    def has_data(self) -> bool:
        return self.pct is not None

    @property
    def pct_for_delta(self) -> float:
        """Percentage for subtraction; missing data counts as 0."""
        return self.pct if self.pct is not None else 0.0

    def combine(self, other: MetricStat) -> MetricStat:
        """Pool two stats for the same metric by summing their counts.

        A percent-only side (pct without counts) cannot be weighted; the
        result then keeps the lowest of its pct and the pooled one.
        """
        if not other.has_data and not other.total:
            return self
        if not self.has_data and not self.total:
            return other
        pct_only = [stat.pct_for_delta for stat in (self, other) if not stat.total]
        total = self.total + other.total
        if total == 0:
            return MetricStat(pct=min(pct_only))
        pooled = MetricStat.from_counts(self.covered + other.covered, total)
        if not pct_only:
            return pooled
        return MetricStat(
            total=total, covered=pooled.covered, pct=min(pooled.pct_for_delta, *pct_only)
        )

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "covered": self.covered, "pct": self.pct}


@dataclass(frozen=True, slots=True)
class Summary:
    """Aggregate coverage of one project.

    ``statements`` is None when the source format has no statement concept
    and nothing filled it in.
    """

    lines: MetricStat = field(default_factory=MetricStat)
    functions: MetricStat = field(default_factory=MetricStat)
    branches: MetricStat = field(default_factory=MetricStat)
    statements: MetricStat | None = None

    def fill_from(self, other: Summary) -> Summary:
        """Take each metric from self when it has data, otherwise from other."""

        def pick(mine: MetricStat | None, theirs: MetricStat | None) -> MetricStat | None:
            if mine is not None and mine.has_data:
                return mine
            if theirs is not None and theirs.has_data:
                return theirs
            return mine if mine is not None else theirs

        return Summary(
            lines=pick(self.lines, other.lines) or MetricStat(),
            functions=pick(self.functions, other.functions) or MetricStat(),
            branches=pick(self.branches, other.branches) or MetricStat(),
            statements=pick(self.statements, other.statements),
        )

    def combine(self, other: Summary) -> Summary:
        """Pool two summaries of the same format by summing counts per metric."""
        if self.statements is None or other.statements is None:
            statements = self.statements or other.statements
        else:
            statements = self.statements.combine(other.statements)
        return Summary(
            lines=self.lines.combine(other.lines),
            functions=self.functions.combine(other.functions),
            branches=self.branches.combine(other.branches),
            statements=statements,
        )

    def to_dict(self) -> dict[str, Any]:
        result = {
            "lines": self.lines.to_dict(),
            "functions": self.functions.to_dict(),
            "branches": self.branches.to_dict(),
        }
        if self.statements is not None:
            result["statements"] = self.statements.to_dict()
        return result


@dataclass(frozen=True, slots=True)
class LineDetail:
    """Hit count of one instrumented line."""

    line: int
    hit: int


@dataclass(frozen=True, slots=True)
class FunctionDetail:
    """Function/method coverage."""

    name: str
    line: int
    hit: int


@dataclass(frozen=True, slots=True)
class BranchDetail:
    """Branch coverage at a specific line.

    Represents a single branch point (e.g., if/else, switch case).
    """

    line: int
    block: int
    branch: int
    taken: int


@dataclass(frozen=True, slots=True)
class LcovCounter:
    """found/hit pair for one metric of one source file."""

    found: int = 0
    hit: int = 0
    details: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class LcovFileRecord:
    """One ``SF:`` ... ``end_of_record`` block of an LCOV tracefile."""

    file: str
    lines: LcovCounter = field(default_factory=LcovCounter)
    functions: LcovCounter = field(default_factory=LcovCounter)
    branches: LcovCounter = field(default_factory=LcovCounter)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "lines": {"found": self.lines.found, "hit": self.lines.hit},
            "functions": {"found": self.functions.found, "hit": self.functions.hit},
            "branches": {"found": self.branches.found, "hit": self.branches.hit},
        }


@dataclass(frozen=True, slots=True)
class ProjectRecord:
    """Everything known about one project in one coverage run."""

    path: str  # ProjectId
    summary: Summary
    raw_detail: tuple[LcovFileRecord, ...] | None = None
    source_formats: frozenset[str] = frozenset()

    def to_dict(self, *, include_detail: bool = False) -> dict[str, Any]:
        result: dict[str, Any] = {
            "path": self.path,
            "summary": self.summary.to_dict(),
            "source_formats": sorted(self.source_formats),
        }
        if include_detail and self.raw_detail is not None:
            result["files"] = [record.to_dict() for record in self.raw_detail]
        return result


# ProjectId -> ProjectRecord for one coverage root
CoverageSnapshot = dict[str, ProjectRecord]


@dataclass(frozen=True, slots=True)
class MetricDelta:
    """Percentage-point differences, current minus base. Never rounded."""

    lines: float
    functions: float
    branches: float
    statements: float

    def is_significant(self, threshold: float = 0.01) -> bool:
        """Whether lines, functions or branches moved by at least threshold points."""
        return any(abs(v) >= threshold for v in (self.lines, self.functions, self.branches))

    def to_dict(self) -> dict[str, float]:
        return {
            "lines": self.lines,
            "functions": self.functions,
            "branches": self.branches,
            "statements": self.statements,
        }


@dataclass(frozen=True, slots=True)
class AddedProject:
    """Project with coverage now but none in the baseline."""

    status: ClassVar[Literal["added"]] = "added"
    current: Summary

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "current": self.current.to_dict()}


@dataclass(frozen=True, slots=True)
class RemovedProject:
    """Project only present in the baseline."""

    status: ClassVar[Literal["removed"]] = "removed"
    base: Summary

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "base": self.base.to_dict()}


@dataclass(frozen=True, slots=True)
class ModifiedProject:
    """Project present in both snapshots."""

    status: ClassVar[Literal["modified"]] = "modified"
    current: Summary
    base: Summary
    delta: MetricDelta

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "current": self.current.to_dict(),
            "base": self.base.to_dict(),
            "delta": self.delta.to_dict(),
        }


ProjectDiff = AddedProject | RemovedProject | ModifiedProject


def snapshot_to_dict(
    snapshot: dict[str, ProjectRecord], *, include_detail: bool = False
) -> dict[str, Any]:
    """JSON-ready view of a snapshot, keyed by project id in sorted order."""
    return {
        project_id: snapshot[project_id].to_dict(include_detail=include_detail)
        for project_id in sorted(snapshot)
    }


def diff_to_dict(diffs: dict[str, ProjectDiff]) -> dict[str, Any]:
    """JSON-ready view of a diff, keyed by project id in sorted order."""
    return {project_id: diffs[project_id].to_dict() for project_id in sorted(diffs)}
