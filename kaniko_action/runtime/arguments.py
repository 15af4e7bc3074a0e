"""Synthesis of the `docker run` invocation for the Kaniko executor."""

from __future__ import annotations

import os
from typing import List, Optional

from ..common.models import BuildConfiguration
from ..core.config import ActionSettings
from .mounts import CONTEXT_MOUNT, OUTPUTS_MOUNT, plan_mounts

DIGEST_FILE = f"{OUTPUTS_MOUNT}/digest"


def generate_args(
    config: BuildConfiguration,
    outputs_dir: str,
    settings: Optional[ActionSettings] = None,
) -> List[str]:
    """
    Generate the arguments passed to the docker CLI.

    Docker flags come first, then the executor image, then Kaniko flags.
    Docker stops parsing its own flags at the image reference, so this
    order must not change.

    Args:
        config: Build configuration.
        outputs_dir: Host directory mounted at the outputs mount point.
        settings: Host settings; read from the environment when omitted.

    Returns:
        Arguments for ``docker``, without the binary itself.
    """
    args = ["run", "--rm"]
    for mount in plan_mounts(config, outputs_dir, settings):
        args.extend(["-v", mount.to_volume()])

    # workaround for kaniko v1.8.0+
    # https://github.com/GoogleContainerTools/kaniko/issues/1542#issuecomment-1066028047
    args.extend(["-e", "container=docker"])

    for run_arg in config.extra_run_args:
        args.extend(run_arg.split(" "))

    args.append(config.executor_image)
    args.extend(["--context", f"dir://{CONTEXT_MOUNT}/"])
    args.extend(["--digest-file", DIGEST_FILE])

    if config.dockerfile_path:
        # Kaniko resolves the Dockerfile from the context root
        dockerfile_in_context = os.path.relpath(config.dockerfile_path, config.context_directory or os.curdir)
        args.extend(["--dockerfile", dockerfile_in_context])
    for build_arg in config.build_args:
        args.extend(["--build-arg", build_arg])
    for label in config.labels:
        args.extend(["--label", label])
    if not config.push:
        args.append("--no-push")
    for tag in config.tags:
        args.extend(["--destination", tag])
    if config.build_target:
        args.extend(["--target", config.build_target])

    if config.use_cache:
        args.append("--cache=true")
        if config.cache_repository:
            args.extend(["--cache-repo", config.cache_repository])
    if config.cache_ttl:
        args.extend(["--cache-ttl", config.cache_ttl])
    if config.push_retry_count:
        args.extend(["--push-retry", config.push_retry_count])
    for mirror in config.registry_mirrors:
        args.extend(["--registry-mirror", mirror])
    if config.verbosity:
        args.extend(["--verbosity", config.verbosity])
    if config.export_archive_path:
        args.extend(["--tar-path", config.export_archive_path])

    args.extend(config.extra_tool_args)
    return args
