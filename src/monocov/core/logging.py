"""Structured logging for CI runs.

Every output is a stdlib handler with a structlog ProcessorFormatter, so one
run can log human-readable lines to the job log, JSON to a file, and
GitHub Actions workflow commands at the same time:

    logging:
      level: DEBUG
      outputs:
        - format: console
          level: INFO
        - format: github          # ::warning:: / ::error:: annotations
          destination: stdout
        - format: json
          destination: /tmp/monocov.jsonl

Events of one invocation share a run id.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from monocov.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

# Only these levels become workflow commands; lower levels print as plain lines
_ANNOTATION_COMMANDS = {
    "warning": "warning",
    "error": "error",
    "critical": "error",
}

# Event keys that never appear in the rendered annotation message
_ANNOTATION_SKIP = frozenset({"event", "level", "timestamp", "run_id", "logger"})


def get_run_id() -> str | None:
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate the id tying together all events of one run."""
    rid = run_id or uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def clear_run_id() -> None:
    _run_id.set(None)


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_run_id():
        event_dict["run_id"] = rid
    return event_dict


def _escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def render_github_annotation(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> str:
    """Render an event as a GitHub Actions workflow command.

    ``coverage_artifact_skipped path=a/lcov.info reason=...`` at warning level
    becomes ``::warning title=coverage_artifact_skipped::path=a/lcov.info reason=...``.
    """
    event = str(event_dict.get("event", ""))
    fields = " ".join(
        f"{key}={value}" for key, value in event_dict.items() if key not in _ANNOTATION_SKIP
    )
    command = _ANNOTATION_COMMANDS.get(str(event_dict.get("level", "")).lower())
    if command is None:
        return f"{event} {fields}".rstrip()
    title = event.replace(",", "%2C").replace(":", "%3A")
    return f"::{command} title={title}::{_escape_command_data(fields or event)}"


_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog. Pass config for multi-output, or use simple params.

    Args:
        config: Logging configuration with outputs
        json_format: Use JSON format for simple setup
        level: Default log level
    """
    from monocov.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    default_level = _LEVEL_MAP.get(config.level.upper(), logging.INFO)
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Re-configured per command once the repo config is known
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)

    # httpx logs every GitHub API request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    for output in config.outputs:
        handler = _open_handler(output.destination)
        handler.setLevel(_LEVEL_MAP.get((output.level or config.level).upper(), default_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer(output),
                foreign_pre_chain=shared_processors,
            )
        )
        root_logger.addHandler(handler)


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    if output.format == "github":
        return render_github_annotation  # type: ignore[return-value]
    stream = sys.stdout if output.destination == "stdout" else sys.stderr
    return structlog.dev.ConsoleRenderer(
        colors=output.destination in ("stderr", "stdout") and stream.isatty(),
        pad_event_to=0,
        pad_level=False,
    )


def _open_handler(destination: str) -> logging.Handler:
    """Handler for stderr, stdout, or an absolute file path."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
