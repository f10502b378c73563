"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (MONOCOV__SECTION__KEY)
3. Repo config (.monocov.yaml)
4. GitHub Actions runner environment (GITHUB_REPOSITORY, GITHUB_EVENT_NAME, ...)
5. Built-in defaults (lowest priority)
"""

import json
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from monocov.config.models import (
    CoverageConfig,
    GitHubConfig,
    LoggingConfig,
    MonoCovConfig,
    ReportConfig,
)
from monocov.core.errors import ConfigError

CONFIG_FILENAME = ".monocov.yaml"

_PR_REF = re.compile(r"^refs/pull/(\d+)/")


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _pr_number_from_event(event_path: str | None) -> int | None:
    if not event_path:
        return None
    try:
        with Path(event_path).open() as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    number = (payload.get("pull_request") or {}).get("number")
    return number if isinstance(number, int) else None


def github_environment(env: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Map the standard GitHub Actions runner variables onto the github section.

    Returns an empty dict outside of GitHub Actions.
    """
    env = os.environ if env is None else env
    section: dict[str, Any] = {}

    if token := env.get("GITHUB_TOKEN"):
        section["token"] = token
    if repository := env.get("GITHUB_REPOSITORY"):
        section["repository"] = repository
    if event_name := env.get("GITHUB_EVENT_NAME"):
        section["event_name"] = event_name
    if api_url := env.get("GITHUB_API_URL"):
        section["api_url"] = api_url
    if output_file := env.get("GITHUB_OUTPUT"):
        section["output_file"] = output_file

    pr_number = _pr_number_from_event(env.get("GITHUB_EVENT_PATH"))
    if pr_number is None and (match := _PR_REF.match(env.get("GITHUB_REF", ""))):
        pr_number = int(match.group(1))
    if pr_number is not None:
        section["pr_number"] = pr_number

    return {"github": section} if section else {}


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class MonoCovSettings(BaseSettings):
        """Root config. Env vars: MONOCOV__LOGGING__LEVEL, MONOCOV__COVERAGE__FOLDER, etc."""

        model_config = SettingsConfigDict(
            env_prefix="MONOCOV__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        coverage: CoverageConfig = CoverageConfig()
        report: ReportConfig = ReportConfig()
        github: GitHubConfig = GitHubConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return MonoCovSettings


MonoCovSettings = _make_settings_class({})


def load_config(
    repo_root: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    **kwargs: Any,
) -> MonoCovConfig:
    """Load config: defaults < runner env < .monocov.yaml < MONOCOV__ env vars < kwargs.

    Args:
        repo_root: Directory holding .monocov.yaml. Defaults to the current
                   working directory.
        env: Runner environment used for GitHub defaults (os.environ if None).
        **kwargs: Section overrides, e.g. ``report={"title": "Cov"}``.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    repo_root = repo_root or Path.cwd()

    yaml_config = _deep_merge(
        github_environment(env),
        _load_yaml(repo_root / CONFIG_FILENAME),
    )

    settings_cls = _make_settings_class(yaml_config)
    try:
        return settings_cls(**kwargs)  # type: ignore[return-value]
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
