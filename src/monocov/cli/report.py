"""monocov report command - full CI run: aggregate, compare, comment."""

from pathlib import Path
from typing import Any

import click

from monocov.config import load_config
from monocov.config.models import MonoCovConfig
from monocov.core.console import report_error, status
from monocov.core.errors import ConfigError, MonoCovError
from monocov.core.logging import clear_run_id, configure_logging, set_run_id
from monocov.github.comments import GitHubCommentService, PullRequestRef
from monocov.ops import run_report


def _overrides(**sections: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Drop options that were not given so lower-precedence sources still apply."""
    result: dict[str, dict[str, Any]] = {}
    for section, values in sections.items():
        given = {key: value for key, value in values.items() if value is not None}
        if given:
            result[section] = given
    return result


def _comment_service(config: MonoCovConfig) -> GitHubCommentService | None:
    """Comment client for pull-request runs; None for any other event.

    Raises:
        ConfigError: If a pull-request run lacks the token, repository or PR number.
    """
    github = config.github
    if not github.is_pull_request:
        return None
    if not github.token:
        raise ConfigError.missing_required("github.token")
    if not github.repository:
        raise ConfigError.missing_required("github.repository")
    if github.pr_number is None:
        raise ConfigError.missing_required("github.pr_number")
    return GitHubCommentService(
        PullRequestRef.parse(github.repository, github.pr_number),
        github.token,
        api_url=github.api_url,
        timeout=github.timeout_sec,
    )


@click.command()
@click.option(
    "--coverage-folder",
    envvar="INPUT_COVERAGE-FOLDER",
    help="Directory holding current coverage artifacts",
)
@click.option(
    "--coverage-base-folder",
    envvar="INPUT_COVERAGE-BASE-FOLDER",
    help="Directory holding baseline coverage artifacts",
)
@click.option("--github-token", envvar="INPUT_GITHUB-TOKEN", help="Token for the GitHub API")
@click.option("--comment-title", envvar="INPUT_COMMENT-TITLE", help="Report heading")
@click.option(
    "--minimum-coverage",
    envvar="INPUT_MINIMUM-COVERAGE",
    type=click.FloatRange(0, 100),
    help="Fail below this overall line coverage",
)
@click.option("--hide-coverage-reports", envvar="INPUT_HIDE-COVERAGE-REPORTS", type=bool)
@click.option("--hide-unchanged", envvar="INPUT_HIDE-UNCHANGED", type=bool)
@click.option("--include-summary", envvar="INPUT_INCLUDE-SUMMARY", type=bool)
@click.option("--update-comment", envvar="INPUT_UPDATE-COMMENT", type=bool)
@click.option("--no-coverage-ran", envvar="INPUT_NO-COVERAGE-RAN", type=bool)
@click.option(
    "--working-directory",
    envvar="INPUT_WORKING-DIRECTORY",
    type=click.Path(file_okay=False, path_type=Path),
    help="Base for relative coverage folders and .monocov.yaml",
)
def report_command(
    coverage_folder: str | None,
    coverage_base_folder: str | None,
    github_token: str | None,
    comment_title: str | None,
    minimum_coverage: float | None,
    hide_coverage_reports: bool | None,
    hide_unchanged: bool | None,
    include_summary: bool | None,
    update_comment: bool | None,
    no_coverage_ran: bool | None,
    working_directory: Path | None,
) -> None:
    """Aggregate coverage, compare it to the baseline and comment on the PR.

    Boolean options take true/false, matching GitHub Actions inputs.
    """
    workdir = working_directory.resolve() if working_directory else Path.cwd()

    overrides = _overrides(
        coverage={
            "folder": coverage_folder,
            "base_folder": coverage_base_folder,
            "no_coverage_ran": no_coverage_ran,
        },
        report={
            "title": comment_title,
            "minimum_coverage": minimum_coverage,
            "hide_coverage_reports": hide_coverage_reports,
            "hide_unchanged": hide_unchanged,
            "include_summary": include_summary,
        },
        github={"token": github_token, "update_comment": update_comment},
    )

    set_run_id()
    try:
        config = load_config(workdir, **overrides)
        root_obj = click.get_current_context().find_root().obj or {}
        if not root_obj.get("verbose"):
            configure_logging(config=config.logging)

        comments = _comment_service(config)
        try:
            result = run_report(config, comments=comments, workdir=workdir)
        finally:
            if comments is not None:
                comments.close()
    except MonoCovError as e:
        report_error(e)
        raise SystemExit(1) from e
    finally:
        clear_run_id()

    if "total-coverage" in result.outputs:
        status(f"Total coverage: {result.outputs['total-coverage']}%")
    if result.failed:
        status(result.message or "Coverage check failed", style="error")
        raise SystemExit(1)
    status("Coverage report complete", style="success")
