"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from monocov.config.models import LoggingConfig, LogOutputConfig
from monocov.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    render_github_annotation,
    set_run_id,
)


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        """Clear run ID before each test."""
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        """Run ID can be set and retrieved."""
        # When
        result = set_run_id("run-123")

        # Then
        assert result == "run-123"
        assert get_run_id() == "run-123"

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        """Set generates UUID-based ID when none provided."""
        rid = set_run_id()
        assert len(rid) == 12  # uuid4().hex[:12]

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        """Clear removes the current run ID."""
        # Given
        set_run_id("to-clear")

        # When
        clear_run_id()

        # Then
        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def test_given_json_format_when_log_then_valid_json_output(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = get_logger("test")

        # When
        logger.info("coverage_aggregated", projects=3)

        # Then
        captured = capsys.readouterr()
        lines = [line for line in captured.err.strip().split("\n") if line]
        if lines:
            data = json.loads(lines[-1])
            assert data["event"] == "coverage_aggregated"
            assert data["projects"] == 3
            assert "timestamp" in data
            assert data["level"] == "info"

    def test_given_run_id_when_log_then_attached(self, tmp_path: Path) -> None:
        """Every event carries the current run id."""
        # Given
        log_file = tmp_path / "run.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="json", destination=str(log_file))]
            )
        )
        set_run_id("abc123")

        # When
        get_logger().info("coverage_total", total="85.00")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["run_id"] == "abc123"
        clear_run_id()

    def test_given_config_object_when_configure_then_takes_precedence(
        self, tmp_path: Path
    ) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When - config's DEBUG should override the level="ERROR" param
        configure_logging(config=config, json_format=False, level="ERROR")
        get_logger().debug("coverage_artifact_parsed")

        # Then
        assert "coverage_artifact_parsed" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_logs_to_all(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content


class TestGithubAnnotations:
    """Workflow command rendering for GitHub Actions logs."""

    def test_given_warning_when_rendered_then_warning_command(self) -> None:
        # Given
        event = {
            "event": "coverage_artifact_skipped",
            "level": "warning",
            "timestamp": "2024-01-01 00:00:00",
            "path": "apps/web/lcov.info",
        }

        # When
        line = render_github_annotation(None, "warning", event)

        # Then
        assert line == "::warning title=coverage_artifact_skipped::path=apps/web/lcov.info"

    def test_given_multiline_error_when_rendered_then_escaped(self) -> None:
        line = render_github_annotation(
            None, "error", {"event": "boom", "level": "error", "reason": "a\nb 100%"}
        )
        assert line == "::error title=boom::reason=a%0Ab 100%25"

    def test_given_info_when_rendered_then_plain_line(self) -> None:
        line = render_github_annotation(
            None, "info", {"event": "coverage_total", "level": "info", "total": "85.00"}
        )
        assert line == "coverage_total total=85.00"

    def test_given_github_output_when_log_then_command_written(self, tmp_path: Path) -> None:
        # Given
        structlog.reset_defaults()
        log_file = tmp_path / "annotations.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="github", destination=str(log_file))]
            )
        )

        # When
        get_logger().warning("base_coverage_failed", folder="base")

        # Then
        assert log_file.read_text().strip() == "::warning title=base_coverage_failed::folder=base"
