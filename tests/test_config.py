"""Unit tests for settings and build configuration loading."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from kaniko_action.common.errors import ConfigurationError
from kaniko_action.common.models import DEFAULT_EXECUTOR_IMAGE, BuildConfiguration
from kaniko_action.core.config import (
    ActionSettings,
    configuration_from_action_inputs,
    load_build_configuration,
)


def test_action_inputs_defaults() -> None:
    config = configuration_from_action_inputs({})

    assert config == BuildConfiguration()
    assert config.executor_image == DEFAULT_EXECUTOR_IMAGE


def test_action_inputs_full() -> None:
    environ = {
        "INPUT_EXECUTOR": "gcr.io/kaniko-project/executor:v1.23.0",
        "INPUT_CACHE": "true",
        "INPUT_CACHE-REPOSITORY": "ghcr.io/example/cache",
        "INPUT_CACHE-TTL": "30d",
        "INPUT_PUSH-RETRY": "3",
        "INPUT_REGISTRY-MIRRORS": "mirror.gcr.io\n\n  mirror.example.com  \n",
        "INPUT_VERBOSITY": "debug",
        "INPUT_KANIKO-ARGS": "--skip-tls-verify\n--single-snapshot",
        "INPUT_BUILD-ARGS": "foo=1\nbar=2",
        "INPUT_CONTEXT": "app",
        "INPUT_FILE": "app/Dockerfile.prod",
        "INPUT_LABELS": "org.opencontainers.image.title=app",
        "INPUT_PUSH": "True",
        "INPUT_TAGS": "ghcr.io/example/app:latest\nghcr.io/example/app:v1",
        "INPUT_TARGET": "server",
        "INPUT_EXECUTOR-RUN-ARGS": "--network host",
        "INPUT_TAR-PATH": " image.tar ",
    }

    config = configuration_from_action_inputs(environ)

    assert config.executor_image == "gcr.io/kaniko-project/executor:v1.23.0"
    assert config.use_cache is True
    assert config.cache_repository == "ghcr.io/example/cache"
    assert config.cache_ttl == "30d"
    assert config.push_retry_count == "3"
    assert config.registry_mirrors == ("mirror.gcr.io", "mirror.example.com")
    assert config.extra_tool_args == ("--skip-tls-verify", "--single-snapshot")
    assert config.build_args == ("foo=1", "bar=2")
    assert config.context_directory == "app"
    assert config.dockerfile_path == "app/Dockerfile.prod"
    assert config.push is True
    assert config.tags == ("ghcr.io/example/app:latest", "ghcr.io/example/app:v1")
    assert config.build_target == "server"
    assert config.extra_run_args == ("--network host",)
    assert config.export_archive_path == "image.tar"


def test_action_inputs_reject_non_yaml_boolean() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        configuration_from_action_inputs({"INPUT_PUSH": "yes"})

    assert excinfo.value.code == "INVALID_BOOLEAN_INPUT"
    assert excinfo.value.subject == "push"


def test_load_yaml_configuration(tmp_path) -> None:
    path = tmp_path / "build.yaml"
    path.write_text(
        "executor_image: executor:test\n"
        "use_cache: true\n"
        "tags:\n"
        "  - app:1\n"
        "  - app:latest\n",
        encoding="utf-8",
    )

    config = load_build_configuration(path)

    assert config.executor_image == "executor:test"
    assert config.use_cache is True
    assert config.tags == ("app:1", "app:latest")


def test_load_json_configuration(tmp_path) -> None:
    path = tmp_path / "build.json"
    path.write_text(json.dumps({"push": True, "labels": ["a=b"]}), encoding="utf-8")

    config = load_build_configuration(path)

    assert config.push is True
    assert config.labels == ("a=b",)


def test_load_configuration_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_build_configuration(tmp_path / "missing.yaml")

    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="is empty"):
        load_build_configuration(empty)

    toml = tmp_path / "build.toml"
    toml.write_text("push = true", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported"):
        load_build_configuration(toml)


def test_unknown_configuration_keys_are_rejected(tmp_path) -> None:
    path = tmp_path / "build.yaml"
    path.write_text("cache: true\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_build_configuration(path)


def test_configuration_is_immutable() -> None:
    config = BuildConfiguration()

    with pytest.raises(ValidationError):
        config.push = True


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_WORKSPACE", "/home/runner/work/app/app")
    monkeypatch.setenv("RUNNER_TEMP", "/home/runner/work/_temp")
    monkeypatch.setenv("KANIKO_ACTION_CHOWN_USER", "builder")
    monkeypatch.setenv("KANIKO_ACTION_CHOWN_SUDO", "false")

    settings = ActionSettings()

    assert settings.github_workspace == "/home/runner/work/app/app"
    assert settings.runner_temp == "/home/runner/work/_temp"
    assert settings.chown_owner == "builder:docker"
    assert settings.chown_with_sudo is False


def test_settings_defaults(monkeypatch) -> None:
    for name in ("GITHUB_WORKSPACE", "DOCKER_BIN", "KANIKO_ACTION_CHOWN_USER", "KANIKO_ACTION_CHOWN_GROUP"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("KANIKO_ACTION_CHOWN_SUDO", raising=False)

    settings = ActionSettings()

    assert settings.github_workspace == "/tmp/github/workspace"
    assert settings.docker_bin == "docker"
    assert settings.chown_owner == "runner:docker"
    assert settings.chown_with_sudo is True


def test_malformed_yaml_is_a_value_error(tmp_path) -> None:
    path = tmp_path / "build.yaml"
    path.write_text("tags: [app:1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_build_configuration(path)
