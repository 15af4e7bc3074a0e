"""Bind mounts for the Kaniko executor container."""

from __future__ import annotations

import os
from typing import List, Optional

from ..common.models import BuildConfiguration, MountSpec
from ..core.config import ActionSettings

CONTEXT_MOUNT = "/kaniko/action/context"
OUTPUTS_MOUNT = "/kaniko/action/outputs"
DOCKER_CONFIG_MOUNT = "/kaniko/.docker/"
WORKSPACE_MOUNT = "/workspace"
GITHUB_WORKSPACE_MOUNT = "/github/workspace"


def plan_mounts(
    config: BuildConfiguration,
    outputs_dir: str,
    settings: Optional[ActionSettings] = None,
) -> List[MountSpec]:
    """Build the mount list for the executor container.

    Mounts (in order):
    1. Build context (ro)
    2. Outputs directory (rw), receives the digest file
    3. Docker credentials from ~/.docker (ro)
    4. Workspace at /workspace (rw)
    5. Workspace at /github/workspace (rw)

    Relative paths are resolved against the current working directory.
    """
    settings = settings or ActionSettings()
    workspace = os.path.abspath(settings.github_workspace)
    return [
        MountSpec(os.path.abspath(config.context_directory), CONTEXT_MOUNT, read_only=True),
        MountSpec(outputs_dir, OUTPUTS_MOUNT),
        MountSpec(f"{settings.home_dir}/.docker/", DOCKER_CONFIG_MOUNT, read_only=True),
        MountSpec(workspace, WORKSPACE_MOUNT),
        MountSpec(workspace, GITHUB_WORKSPACE_MOUNT),
    ]


def writable_workspace_mounts(mounts: List[MountSpec]) -> List[MountSpec]:
    """Mounts the executor writes into as a different user: outputs and both workspace mounts."""
    owned = {OUTPUTS_MOUNT, WORKSPACE_MOUNT, GITHUB_WORKSPACE_MOUNT}
    return [mount for mount in mounts if mount.container_path in owned]
