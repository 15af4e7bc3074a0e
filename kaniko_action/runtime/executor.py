"""Run a Kaniko build through the docker CLI and collect its outputs."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from ..common.command_runner import CommandResult, CommandRunner
from ..common.errors import CommandFailedError, ExportPathNotMountedError, KanikoActionError
from ..common.models import BuildConfiguration, RunResult
from ..common.workflow import group
from ..core.config import ActionSettings
from .arguments import generate_args
from .containment import find_path_in_mounts
from .mounts import plan_mounts, writable_workspace_mounts

OUTPUTS_DIR_PREFIX = "kaniko-action-"


class KanikoRunner:
    """Pull the executor image, run the build, and read back the digest."""

    def __init__(
        self,
        command_runner: Optional[CommandRunner] = None,
        settings: Optional[ActionSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.command_runner = command_runner or CommandRunner()
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    def run(self, config: BuildConfiguration) -> RunResult:
        """
        Execute a single build.

        Args:
            config: Build configuration for this run.

        Returns:
            Digest, outputs directory and the tar path relative to its mount.

        Raises:
            CommandFailedError: When the pull or the build fails.
            ExportPathNotMountedError: When an absolute tar path is outside every mount.
            KanikoActionError: When the executor did not write a digest file.
        """
        settings = self.settings or ActionSettings()

        with group(f"Pulling {config.executor_image}"):
            pull_result = self._docker(settings, ["pull", "-q", config.executor_image])
            self._check(pull_result, f"Failed to pull {config.executor_image}", "DOCKER_PULL_FAILED")
            self.logger.info("Pulled in %.3fs", pull_result.duration)

        outputs_dir = tempfile.mkdtemp(prefix=OUTPUTS_DIR_PREFIX, dir=settings.runner_temp)
        args = generate_args(config, outputs_dir, settings)
        try:
            export_archive_relative_path = self._resolve_export_path(config, args)
        except ExportPathNotMountedError:
            shutil.rmtree(outputs_dir, ignore_errors=True)
            raise

        build_result = self._docker(settings, args, stream_output=True)
        self._check(build_result, "Kaniko build failed", "KANIKO_BUILD_FAILED")
        self.logger.info("Built in %.3fs", build_result.duration)

        digest = self._read_digest(outputs_dir)

        self.logger.info("%s", digest)
        self.logger.info("%s", outputs_dir)
        self.logger.info("%s", export_archive_relative_path)

        owned = [mount.host_path for mount in writable_workspace_mounts(plan_mounts(config, outputs_dir, settings))]
        self._change_ownership(settings, owned)

        return RunResult(
            image_digest=digest,
            outputs_directory=outputs_dir,
            export_archive_relative_path=export_archive_relative_path,
        )

    def _docker(self, settings: ActionSettings, args: Sequence[str], stream_output: bool = False) -> CommandResult:
        return self.command_runner.run([settings.docker_bin, *args], stream_output=stream_output)

    def _check(self, result: CommandResult, message: str, code: str) -> None:
        if result.succeeded():
            return
        self.logger.error("%s: %s", message, result.error_message())
        raise CommandFailedError(message, result, code=code)

    def _resolve_export_path(self, config: BuildConfiguration, args: List[str]) -> str:
        export_path = config.export_archive_path
        if not export_path:
            return ""
        # relative tar paths are already relative to the context
        if not os.path.isabs(export_path):
            return export_path

        relative_path = find_path_in_mounts(export_path, args)
        if relative_path is None:
            raise ExportPathNotMountedError(export_path)
        return relative_path

    def _read_digest(self, outputs_dir: str) -> str:
        digest_file = Path(outputs_dir) / "digest"
        try:
            return digest_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError as exc:
            raise KanikoActionError(
                f"Kaniko did not write a digest file to {digest_file}",
                code="DIGEST_NOT_FOUND",
                subject=str(digest_file),
            ) from exc

    def _change_ownership(self, settings: ActionSettings, paths: Sequence[str]) -> None:
        """Best-effort chown of directories written by the executor; failures are only logged."""
        if not paths:
            return
        with ThreadPoolExecutor(max_workers=len(paths)) as pool:
            list(pool.map(lambda path: self._chown(settings, path), paths))

    def _chown(self, settings: ActionSettings, path: str) -> None:
        command = ["chown", "-R", settings.chown_owner, path]
        if settings.chown_with_sudo:
            command.insert(0, "sudo")
        try:
            result = self.command_runner.run(command)
        except Exception as exc:
            self.logger.info("Cannot change ownership of %s: %s", path, exc)
            return
        if not result.succeeded():
            self.logger.info("Cannot change ownership of %s: %s", path, result.error_message())
