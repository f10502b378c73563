"""Coverage aggregation and diffing.

This package provides:
- Multi-format artifact parsing (Istanbul json-summary, LCOV)
- Per-project aggregation of a coverage directory tree
- Snapshot comparison with added/removed/modified classification

Usage:
    from monocov.coverage import aggregate, diff_snapshots

    current = aggregate(Path("coverage"))
    base = aggregate(Path("base-coverage"))
    changes = diff_snapshots(current, base)
"""

from monocov.coverage.aggregate import aggregate
from monocov.coverage.diff import RemovedPolicy, compute_delta, diff_snapshots
from monocov.coverage.merge import merge_project_records
from monocov.coverage.metrics import percentage, total_line_coverage
from monocov.coverage.models import (
    ROOT_PROJECT_ID,
    AddedProject,
    CoverageSnapshot,
    LcovCounter,
    LcovFileRecord,
    MetricDelta,
    MetricStat,
    ModifiedProject,
    ProjectDiff,
    ProjectRecord,
    RemovedProject,
    Summary,
    diff_to_dict,
    snapshot_to_dict,
)
from monocov.coverage.naming import NamingPolicy, derive_project_id
from monocov.coverage.parsers import (
    ARTIFACT_FILENAMES,
    PARSER_REGISTRY,
    ParsedArtifact,
    fold_records,
    parse_artifact,
)

__all__ = [
    # Models
    "AddedProject",
    "CoverageSnapshot",
    "LcovCounter",
    "LcovFileRecord",
    "MetricDelta",
    "MetricStat",
    "ModifiedProject",
    "ProjectDiff",
    "ProjectRecord",
    "RemovedProject",
    "ROOT_PROJECT_ID",
    "Summary",
    "diff_to_dict",
    "snapshot_to_dict",
    # Parsers
    "ARTIFACT_FILENAMES",
    "PARSER_REGISTRY",
    "ParsedArtifact",
    "fold_records",
    "parse_artifact",
    # Aggregation
    "NamingPolicy",
    "aggregate",
    "derive_project_id",
    "merge_project_records",
    # Diff
    "RemovedPolicy",
    "compute_delta",
    "diff_snapshots",
    # Metrics
    "percentage",
    "total_line_coverage",
]
