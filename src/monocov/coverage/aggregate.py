"""Summary aggregation over a coverage directory tree.

Walks a coverage root, parses every json-summary and LCOV artifact, and
folds them into one ProjectRecord per project id. A corrupt or unreadable
artifact is logged and skipped; only a missing root is fatal.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from monocov.core.errors import NotFoundError, ParseError, ReadError
from monocov.coverage.merge import merge_project_records
from monocov.coverage.models import CoverageSnapshot, ProjectRecord
from monocov.coverage.naming import NamingPolicy
from monocov.coverage.parsers import ARTIFACT_FILENAMES, parse_artifact
from monocov.files.ops import FileSystem, LocalFileSystem

logger = structlog.get_logger()


def _load_artifact(
    path: Path, root: Path, fs: FileSystem, naming: NamingPolicy
) -> ProjectRecord | None:
    project_id = naming.project_id(path, root)
    try:
        parsed = parse_artifact(fs.read_text(path), source=str(path))
    except (ReadError, ParseError) as e:
        logger.warning(
            "coverage_artifact_skipped",
            path=str(path),
            project=project_id,
            error=e.error_name,
            reason=e.details.get("reason", e.message),
        )
        return None

    logger.debug(
        "coverage_artifact_parsed",
        path=str(path),
        project=project_id,
        format=parsed.format_id,
    )
    return ProjectRecord(
        path=project_id,
        summary=parsed.summary,
        raw_detail=parsed.raw_detail,
        source_formats=frozenset({parsed.format_id}),
    )


def aggregate(
    root: Path,
    *,
    fs: FileSystem | None = None,
    naming: NamingPolicy | None = None,
    max_workers: int = 1,
) -> CoverageSnapshot:
    """Build a coverage snapshot from every artifact under root.

    Args:
        root: Coverage root directory.
        fs: Filesystem collaborator (local disk by default).
        naming: Project id policy (full relative directory by default).
        max_workers: Artifacts read and parsed in parallel. The snapshot is
                     the same regardless of this value.

    Returns:
        ProjectId -> ProjectRecord. May be empty.

    Raises:
        NotFoundError: If root does not exist.
    """
    fs = fs or LocalFileSystem()
    naming = naming or NamingPolicy()

    if not fs.exists(root):
        raise NotFoundError.coverage_root(str(root))

    artifacts = fs.find_files(root, ARTIFACT_FILENAMES)
    logger.info("coverage_artifacts_found", root=str(root), count=len(artifacts))

    def load(path: Path) -> ProjectRecord | None:
        return _load_artifact(path, root, fs, naming)

    if max_workers > 1 and len(artifacts) > 1:
        with ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="monocov-parse"
        ) as pool:
            loaded = list(pool.map(load, artifacts))
    else:
        loaded = [load(path) for path in artifacts]

    grouped: dict[str, list[ProjectRecord]] = {}
    for record in loaded:
        if record is not None:
            grouped.setdefault(record.path, []).append(record)

    snapshot: CoverageSnapshot = {
        project_id: merge_project_records(records)
        for project_id, records in sorted(grouped.items())
    }

    skipped = sum(1 for record in loaded if record is None)
    logger.info(
        "coverage_aggregated",
        root=str(root),
        projects=len(snapshot),
        artifacts=len(artifacts),
        skipped=skipped,
    )
    return snapshot
