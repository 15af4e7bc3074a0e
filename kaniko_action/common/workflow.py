"""GitHub Actions workflow commands: log groups, step outputs and failure annotations."""

from __future__ import annotations

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional, TextIO

logger = logging.getLogger(__name__)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(command: str, message: str, stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    stream.write(f"::{command}::{_escape_data(message)}\n")
    stream.flush()


@contextmanager
def group(title: str, stream: Optional[TextIO] = None) -> Iterator[None]:
    """Fold everything logged inside the block into a collapsible log group."""
    issue_command("group", title, stream)
    try:
        yield
    finally:
        issue_command("endgroup", "", stream)


def set_failed(message: str, stream: Optional[TextIO] = None) -> None:
    """Annotate the step with an error. The caller decides the exit code."""
    issue_command("error", message, stream)


def set_output(name: str, value: str, environ: Optional[Mapping[str, str]] = None) -> None:
    """Append a step output to the file named by ``GITHUB_OUTPUT``."""
    environ = os.environ if environ is None else environ
    output_file = environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.info("GITHUB_OUTPUT is not set; output %s=%s", name, value)
        return

    if "\n" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        entry = f"{name}={value}\n"
    with open(output_file, "a", encoding="utf-8") as handle:
        handle.write(entry)
