"""Shared data models for the build configuration, mount plan and run result."""
from dataclasses import dataclass
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EXECUTOR_IMAGE = "gcr.io/kaniko-project/executor:latest"


class BuildConfiguration(BaseModel):
    """Options for a single Kaniko build. Empty values mean the option is omitted."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    executor_image: str = Field(default=DEFAULT_EXECUTOR_IMAGE, description="Kaniko executor image reference")

    # Kaniko cache
    use_cache: bool = Field(default=False, description="Emit --cache=true")
    cache_repository: str = Field(default="", description="Remote cache repository, only used with use_cache")
    cache_ttl: str = Field(default="", description="Cache TTL, e.g. '30d'")

    # Kaniko pass-through options
    push_retry_count: str = Field(default="", description="Number of push retries performed by Kaniko")
    registry_mirrors: Tuple[str, ...] = Field(default=(), description="Registry mirrors in priority order")
    verbosity: str = Field(default="", description="Kaniko log verbosity")
    extra_tool_args: Tuple[str, ...] = Field(default=(), description="Raw Kaniko flags appended last")

    # Build inputs
    build_args: Tuple[str, ...] = Field(default=(), description="KEY=VALUE build arguments")
    labels: Tuple[str, ...] = Field(default=(), description="KEY=VALUE image labels")
    tags: Tuple[str, ...] = Field(default=(), description="Image destinations")
    context_directory: str = Field(default="", description="Build context; relative to the working directory")
    dockerfile_path: str = Field(default="", description="Dockerfile; empty means <context>/Dockerfile")
    build_target: str = Field(default="", description="Target stage of a multi-stage build")
    push: bool = Field(default=False, description="Push the image to its destinations")

    # Docker
    extra_run_args: Tuple[str, ...] = Field(
        default=(),
        description="Extra `docker run` arguments; every element is split on spaces",
    )
    export_archive_path: str = Field(default="", description="Host path for the image tarball export")


@dataclass(frozen=True)
class MountSpec:
    """Bind mount from a host directory into the executor container."""

    host_path: str
    container_path: str
    read_only: bool = False

    def to_volume(self) -> str:
        """Render the value of a `docker run -v` flag."""
        volume = f"{self.host_path}:{self.container_path}"
        if self.read_only:
            volume += ":ro"
        return volume


@dataclass
class RunResult:
    """Values handed back to the calling pipeline."""

    image_digest: str
    outputs_directory: str
    export_archive_relative_path: str = ""
