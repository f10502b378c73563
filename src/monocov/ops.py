"""Report run orchestration.

One CI invocation: aggregate current (and baseline) coverage, compute step
outputs, enforce the minimum, render the markdown report and publish it on
the pull request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from monocov.config.models import MonoCovConfig
from monocov.core.errors import MonoCovError, NoCoverageDataError
from monocov.coverage.aggregate import aggregate
from monocov.coverage.diff import RemovedPolicy
from monocov.coverage.metrics import total_line_coverage
from monocov.coverage.models import CoverageSnapshot, ProjectRecord
from monocov.coverage.naming import NamingPolicy
from monocov.files.ops import FileSystem, LocalFileSystem
from monocov.github.comments import CommentService
from monocov.report.markdown import ReportOptions, generate_report, no_coverage_comment

logger = structlog.get_logger()


@dataclass
class RunResult:
    """Outcome of a report run."""

    outputs: dict[str, str] = field(default_factory=dict)
    report: str | None = None
    comment_id: int | None = None
    failed: bool = False
    message: str | None = None
    current: CoverageSnapshot = field(default_factory=dict)
    base: CoverageSnapshot | None = None


def compute_outputs(
    current: Mapping[str, ProjectRecord], base: Mapping[str, ProjectRecord] | None
) -> dict[str, str]:
    """Step outputs: total-coverage, and with a baseline coverage-changed / coverage-diff."""
    total = total_line_coverage(current)
    outputs = {"total-coverage": f"{total:.2f}"}

    if base is not None:
        change = total - total_line_coverage(base)
        outputs["coverage-changed"] = "true" if change != 0 else "false"
        outputs["coverage-diff"] = f"+{change:.2f}" if change > 0 else f"{change:.2f}"

    return outputs


def write_outputs(path: Path, outputs: Mapping[str, str]) -> None:
    """Append key=value lines to a GITHUB_OUTPUT style file."""
    with path.open("a", encoding="utf-8") as f:
        for key, value in outputs.items():
            f.write(f"{key}={value}\n")


def report_options(config: MonoCovConfig) -> ReportOptions:
    return ReportOptions(
        title=config.report.title,
        hide_coverage_reports=config.report.hide_coverage_reports,
        hide_unchanged=config.report.hide_unchanged,
        include_summary=config.report.include_summary,
        change_threshold=config.report.change_threshold,
        removed=RemovedPolicy.REPORT if config.coverage.include_removed else RemovedPolicy.OMIT,
    )


def _resolve(folder: str, workdir: Path | None) -> Path:
    path = Path(folder)
    if workdir is not None and not path.is_absolute():
        return workdir / path
    return path


def _publish(config: MonoCovConfig, comments: CommentService | None, body: str) -> int | None:
    if not config.github.is_pull_request:
        logger.info("comment_skipped", reason="not a pull request event")
        return None
    if comments is None:
        logger.warning("comment_skipped", reason="no comment service configured")
        return None

    if config.github.update_comment:
        existing = comments.find(config.report.title)
        if existing is not None:
            comments.update(existing, body)
            return existing
    return comments.post(body)


def run_report(
    config: MonoCovConfig,
    *,
    fs: FileSystem | None = None,
    comments: CommentService | None = None,
    workdir: Path | None = None,
) -> RunResult:
    """Run the whole coverage report flow.

    Args:
        config: Resolved configuration.
        fs: Filesystem collaborator (local disk by default).
        comments: Pull-request comment service; publishing is skipped without one.
        workdir: Base directory for relative coverage folders.

    Returns:
        RunResult with step outputs, rendered report and failure status.

    Raises:
        NotFoundError: If the current coverage folder does not exist.
        NoCoverageDataError: If it holds no usable artifact.
        CommentError: If publishing the comment fails.
    """
    fs = fs or LocalFileSystem()
    naming = NamingPolicy(depth=config.coverage.project_depth)

    if config.coverage.no_coverage_ran:
        logger.info("coverage_not_generated")
        result = RunResult()
        if config.github.is_pull_request:
            result.comment_id = _publish(config, comments, no_coverage_comment(config.report.title))
        return result

    folder = _resolve(config.coverage.folder, workdir)
    current = aggregate(folder, fs=fs, naming=naming, max_workers=config.coverage.max_workers)
    if not current:
        raise NoCoverageDataError.empty(str(folder))

    base: CoverageSnapshot | None = None
    if config.coverage.base_folder:
        base_folder = _resolve(config.coverage.base_folder, workdir)
        if fs.exists(base_folder):
            try:
                base = aggregate(
                    base_folder, fs=fs, naming=naming, max_workers=config.coverage.max_workers
                )
            except MonoCovError as e:
                logger.warning("base_coverage_failed", folder=str(base_folder), reason=e.message)
        else:
            logger.info("base_coverage_missing", folder=str(base_folder))

    result = RunResult(current=current, base=base)
    result.outputs = compute_outputs(current, base)
    logger.info("coverage_total", total=result.outputs["total-coverage"])

    total = total_line_coverage(current)
    minimum = config.report.minimum_coverage
    if total < minimum:
        result.failed = True
        result.message = f"Coverage {total:.2f}% is below minimum required {minimum}%"
        logger.error("coverage_below_minimum", total=round(total, 2), minimum=minimum)

    if config.github.output_file:
        write_outputs(Path(config.github.output_file), result.outputs)

    result.report = generate_report(current, base, options=report_options(config))
    if config.github.is_pull_request:
        result.comment_id = _publish(config, comments, result.report)

    return result
