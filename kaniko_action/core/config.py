"""Runner settings and loaders for the build configuration."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from ..common.errors import ConfigurationError
from ..common.models import DEFAULT_EXECUTOR_IMAGE, BuildConfiguration

DEFAULT_GITHUB_WORKSPACE = "/tmp/github/workspace"

_TRUE_VALUES = {"true", "True", "TRUE"}
_FALSE_VALUES = {"false", "False", "FALSE"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class ActionSettings(BaseModel):
    """Environment-derived settings for the host running the executor."""

    # Docker settings
    docker_bin: str = Field(default_factory=lambda: os.environ.get("DOCKER_BIN", "docker"))

    # Directory settings
    github_workspace: str = Field(
        default_factory=lambda: os.environ.get("GITHUB_WORKSPACE") or DEFAULT_GITHUB_WORKSPACE,
        description="Workspace mounted at /workspace and /github/workspace",
    )
    runner_temp: str = Field(
        default_factory=lambda: os.environ.get("RUNNER_TEMP") or tempfile.gettempdir(),
        description="Parent directory of the per-run outputs directory",
    )
    home_dir: str = Field(
        default_factory=lambda: os.path.expanduser("~"),
        description="Home directory holding the .docker credentials directory",
    )

    # Ownership normalization
    chown_user: str = Field(default_factory=lambda: os.environ.get("KANIKO_ACTION_CHOWN_USER", "runner"))
    chown_group: str = Field(default_factory=lambda: os.environ.get("KANIKO_ACTION_CHOWN_GROUP", "docker"))
    chown_with_sudo: bool = Field(default_factory=lambda: _env_flag("KANIKO_ACTION_CHOWN_SUDO", True))

    @property
    def chown_owner(self) -> str:
        return f"{self.chown_user}:{self.chown_group}"


def load_build_configuration(path: str | Path) -> BuildConfiguration:
    """Load a build configuration from a YAML or JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Build config file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in build config file {path}: {exc}") from exc
    elif suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    else:
        raise ValueError(f"Unsupported build config format: {suffix}")

    if data is None:
        raise ValueError(f"Build config file {path} is empty.")

    return BuildConfiguration.model_validate(data)


def configuration_from_action_inputs(environ: Optional[Mapping[str, str]] = None) -> BuildConfiguration:
    """
    Build the configuration from GitHub Actions ``INPUT_*`` variables.

    Input names follow action.yml (``cache-repository`` is read from
    ``INPUT_CACHE-REPOSITORY``). List inputs are one entry per line.

    Raises:
        ConfigurationError: When a boolean input is not a YAML 1.2 boolean.
    """
    inputs = _ActionInputs(os.environ if environ is None else environ)
    return BuildConfiguration(
        executor_image=inputs.get("executor") or DEFAULT_EXECUTOR_IMAGE,
        use_cache=inputs.get_bool("cache"),
        cache_repository=inputs.get("cache-repository"),
        cache_ttl=inputs.get("cache-ttl"),
        push_retry_count=inputs.get("push-retry"),
        registry_mirrors=inputs.get_list("registry-mirrors"),
        verbosity=inputs.get("verbosity"),
        extra_tool_args=inputs.get_list("kaniko-args"),
        build_args=inputs.get_list("build-args"),
        context_directory=inputs.get("context"),
        dockerfile_path=inputs.get("file"),
        labels=inputs.get_list("labels"),
        push=inputs.get_bool("push"),
        tags=inputs.get_list("tags"),
        build_target=inputs.get("target"),
        extra_run_args=inputs.get_list("executor-run-args"),
        export_archive_path=inputs.get("tar-path"),
    )


class _ActionInputs:
    """Reads inputs the way the Actions toolkit does."""

    def __init__(self, environ: Mapping[str, str]) -> None:
        self.environ = environ

    def get(self, name: str) -> str:
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        return self.environ.get(key, "").strip()

    def get_list(self, name: str) -> List[str]:
        return [line.strip() for line in self.get(name).splitlines() if line.strip()]

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.get(name)
        if value == "":
            return default
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ConfigurationError(
            f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`",
            code="INVALID_BOOLEAN_INPUT",
            subject=name,
        )
