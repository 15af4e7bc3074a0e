"""Locate a host path inside the directories mounted into the executor."""

from __future__ import annotations

import os
from typing import Optional, Sequence


def find_path_in_mounts(candidate: str, args: Sequence[str]) -> Optional[str]:
    """
    Return ``candidate`` relative to the first mounted host directory containing it.

    Only ``-v host:container[:ro]`` flags of ``args`` are considered. Returns
    None when ``candidate`` is relative or lies outside every mounted directory.

    Example:
        >>> find_path_in_mounts("/host/ws/output.tar", ["-v", "/host/ws:/workspace"])
        'output.tar'
    """
    if not os.path.isabs(candidate):
        return None
    # ".." and repeated separators must not escape or survive the prefix match
    candidate = os.path.normpath(candidate)

    for flag, value in zip(args, args[1:]):
        if flag != "-v":
            continue
        parts = value.split(":")
        if len(parts) < 2:
            continue
        host_path = os.path.normpath(parts[0]) if parts[0] else ""
        if host_path not in ("", "/", "//") and candidate.startswith(host_path + "/"):
            return candidate[len(host_path) + 1:]
    return None
