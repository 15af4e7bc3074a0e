"""Kaniko executor invocation: mount planning, argument synthesis and the run itself."""

from .arguments import generate_args
from .containment import find_path_in_mounts
from .executor import KanikoRunner
from .mounts import plan_mounts

__all__ = [
    "KanikoRunner",
    "find_path_in_mounts",
    "generate_args",
    "plan_mounts",
]
