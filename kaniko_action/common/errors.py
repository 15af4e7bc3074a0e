"""Exceptions raised by the kaniko-action runtime."""
from __future__ import annotations

from typing import Optional

from .command_runner import CommandResult


class KanikoActionError(RuntimeError):
    """Base error. ``code`` is a stable identifier, ``subject`` the offending value."""

    default_code = "KANIKO_ACTION_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None, subject: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.subject = subject


class ConfigurationError(KanikoActionError):
    """The caller-supplied configuration cannot be executed."""

    default_code = "INVALID_CONFIGURATION"


class ExportPathNotMountedError(ConfigurationError):
    """An absolute tar path lies outside every directory mounted into the executor."""

    default_code = "TAR_PATH_NOT_MOUNTED"

    def __init__(self, export_archive_path: str) -> None:
        super().__init__(
            f"Cannot find the tar-path {export_archive_path} in the arguments.\n"
            "Mount the tar-path directory to the container manually using executor-run-args\n"
            "or provide the relative tar-path.",
            subject=export_archive_path,
        )


class CommandFailedError(KanikoActionError):
    """An external docker command did not finish successfully."""

    default_code = "COMMAND_FAILED"

    def __init__(self, message: str, result: CommandResult, *, code: Optional[str] = None) -> None:
        if not result.tool_available:
            code = "DOCKER_CLI_NOT_FOUND"
        super().__init__(f"{message}: {result.error_message()}", code=code, subject=" ".join(result.command))
        self.result = result
