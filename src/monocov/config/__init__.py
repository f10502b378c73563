"""Config module exports."""

from monocov.config.loader import MonoCovSettings, github_environment, load_config
from monocov.config.models import (
    CoverageConfig,
    GitHubConfig,
    LoggingConfig,
    LogOutputConfig,
    MonoCovConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "github_environment",
    "MonoCovConfig",
    "MonoCovSettings",
    "CoverageConfig",
    "GitHubConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReportConfig",
]
