from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence


@dataclass(slots=True)
class CommandResult:
    """Represents the outcome of an external command execution."""

    command: Sequence[str]
    return_code: Optional[int]
    stdout: str
    stderr: str
    duration: float
    timed_out: bool
    tool_available: bool
    exception: Optional[BaseException] = None

    def succeeded(self) -> bool:
        """Return True when the command finished successfully."""
        return self.return_code == 0 and not self.timed_out and self.tool_available

    def error_message(self) -> str:
        """Best available description of why the command failed."""
        if self.timed_out:
            return f"timed out after {self.duration:.2f}s"
        if not self.tool_available:
            return f"command not found: {self.command[0]}"
        message = self.stderr.strip() or self.stdout.strip()
        if message:
            return message
        return f"exited with code {self.return_code}"


class CommandRunner:
    """Thin wrapper over subprocess that captures execution metadata."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
        stream_output: bool = False,
    ) -> CommandResult:
        """Execute a command and capture stdout, stderr, timings, and failures.

        With ``stream_output`` the child inherits this process's stdout/stderr so
        long-running builds show progress live; nothing is captured in that case.
        """
        start = time.time()
        try:
            self.logger.debug("Executing command: %s (cwd=%s)", " ".join(command), cwd)
            completed = subprocess.run(
                list(command),
                capture_output=not stream_output,
                text=True,
                timeout=timeout,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env else None,
            )
            duration = time.time() - start
            return CommandResult(
                command=command,
                return_code=completed.returncode,
                stdout=completed.stdout or "",
                stderr=completed.stderr or "",
                duration=duration,
                timed_out=False,
                tool_available=True,
            )
        except subprocess.TimeoutExpired as exc:
            duration = time.time() - start
            self.logger.warning("Command timed out after %.2fs: %s", duration, " ".join(command))
            return CommandResult(
                command=command,
                return_code=None,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
                duration=duration,
                timed_out=True,
                tool_available=True,
                exception=exc,
            )
        except FileNotFoundError as exc:
            duration = time.time() - start
            self.logger.error("Command not found: %s", command[0])
            return CommandResult(
                command=command,
                return_code=None,
                stdout="",
                stderr=f"Command not found: {command[0]}",
                duration=duration,
                timed_out=False,
                tool_available=False,
                exception=exc,
            )
        except OSError as exc:
            duration = time.time() - start
            self.logger.error("Command execution failed: %s", exc)
            return CommandResult(
                command=command,
                return_code=None,
                stdout="",
                stderr=str(exc),
                duration=duration,
                timed_out=False,
                tool_available=True,
                exception=exc,
            )


def _as_text(value: Optional[str | bytes]) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value
