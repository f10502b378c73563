"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (MONOCOV__SECTION__KEY)
3. Repo YAML (.monocov.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    MONOCOV__<SECTION>__<KEY>=<VALUE>

Examples:
    MONOCOV__LOGGING__LEVEL=DEBUG
    MONOCOV__COVERAGE__FOLDER=coverage
    MONOCOV__REPORT__MINIMUM_COVERAGE=80
    MONOCOV__GITHUB__UPDATE_COMMENT=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console", "github"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        MONOCOV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every parsed artifact.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """Coverage discovery configuration.

    Env vars:
        MONOCOV__COVERAGE__FOLDER: Root directory holding current coverage artifacts
        MONOCOV__COVERAGE__BASE_FOLDER: Root directory holding baseline artifacts
        MONOCOV__COVERAGE__PROJECT_DEPTH: Leading path segments kept in project ids
        MONOCOV__COVERAGE__MAX_WORKERS: Parallel artifact parsers
    """

    folder: str = Field(
        default="coverage",
        description="Directory walked for coverage-summary.json and lcov.info files.",
    )
    base_folder: str | None = Field(
        default=None,
        description="Baseline coverage directory (e.g. from the target branch). "
        "Comparison is skipped when unset or missing.",
    )
    project_depth: int | None = Field(
        default=None,
        description="Keep only this many leading directory segments in project ids "
        "(2 -> 'apps/frontend'). None uses the full relative directory.",
    )
    include_removed: bool = Field(
        default=False,
        description="Report projects present only in the baseline as removed. "
        "Off by default: deleted code is not a coverage regression.",
    )
    max_workers: int = Field(
        default=1,
        description="Artifacts parsed in parallel. 1 parses sequentially.",
    )
    no_coverage_ran: bool = Field(
        default=False,
        description="The build produced no coverage; post a notice instead of a report.",
    )

    @field_validator("project_depth")
    @classmethod
    def validate_project_depth(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"project_depth must be >= 1, got {v}")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class ReportConfig(BaseModel):
    """Markdown report configuration.

    Env vars:
        MONOCOV__REPORT__TITLE: Comment heading, also used to find earlier comments
        MONOCOV__REPORT__MINIMUM_COVERAGE: Fail the run below this total line coverage
    """

    title: str = Field(
        default="Coverage Report",
        description="Report heading. Existing comments are matched on '## <title>'.",
    )
    hide_coverage_reports: bool = Field(
        default=False,
        description="Omit the per-project tables.",
    )
    hide_unchanged: bool = Field(
        default=False,
        description="Drop projects whose deltas are all below change_threshold.",
    )
    include_summary: bool = Field(
        default=False,
        description="Prepend overall coverage and its change against the baseline.",
    )
    minimum_coverage: float = Field(
        default=0.0,
        description="Minimum total line coverage percentage. 0 disables the check.",
    )
    change_threshold: float = Field(
        default=0.01,
        description="Deltas below this many percentage points render as unchanged.",
    )

    @field_validator("minimum_coverage")
    @classmethod
    def validate_minimum_coverage(cls, v: float) -> float:
        if not (0.0 <= v <= 100.0):
            raise ValueError(f"minimum_coverage must be 0-100, got {v}")
        return v

    @field_validator("change_threshold")
    @classmethod
    def validate_change_threshold(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"change_threshold must be >= 0, got {v}")
        return v


class GitHubConfig(BaseModel):
    """Pull-request comment configuration.

    Env vars:
        MONOCOV__GITHUB__TOKEN: API token with pull-request write access
        MONOCOV__GITHUB__REPOSITORY: owner/repo
        MONOCOV__GITHUB__PR_NUMBER: Pull request number
        MONOCOV__GITHUB__EVENT_NAME: CI event name (comments only on pull_request)
    """

    token: str | None = Field(default=None, description="GitHub API token.")
    repository: str | None = Field(default=None, description="Repository as owner/repo.")
    pr_number: int | None = Field(default=None, description="Pull request number.")
    event_name: str | None = Field(
        default=None,
        description="Triggering event. Comments are only posted for 'pull_request'.",
    )
    api_url: str = Field(default="https://api.github.com", description="GitHub API base URL.")
    update_comment: bool = Field(
        default=False,
        description="Edit the previous report comment instead of adding a new one.",
    )
    output_file: str | None = Field(
        default=None,
        description="File receiving key=value step outputs (GITHUB_OUTPUT).",
    )
    timeout_sec: float = Field(default=30.0, description="HTTP timeout for API calls.")

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str | None) -> str | None:
        if v is None:
            return v
        owner, sep, repo = v.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"repository must be 'owner/repo', got {v!r}")
        return v

    @property
    def is_pull_request(self) -> bool:
        return self.event_name in ("pull_request", "pull_request_target")


class MonoCovConfig(BaseModel):
    """Root configuration model (type hint for the settings class)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
