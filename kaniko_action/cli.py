"""Command line entry point: run one Kaniko build and publish its outputs."""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from .common.errors import KanikoActionError
from .common.models import BuildConfiguration
from .common.workflow import set_failed, set_output
from .core.config import ActionSettings, configuration_from_action_inputs, load_build_configuration
from .runtime import KanikoRunner, generate_args
from .runtime.executor import OUTPUTS_DIR_PREFIX

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Configure root logging based on verbosity level."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
    )
    logging.getLogger("kaniko_action").setLevel(log_level)


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Build a container image with Kaniko.")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a build configuration YAML/JSON file (defaults to the action's INPUT_* variables).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the docker invocation without pulling or building.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(argv)


def load_configuration(config_path: Optional[str]) -> BuildConfiguration:
    if config_path:
        return load_build_configuration(config_path)
    return configuration_from_action_inputs()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for a single build."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)
    load_dotenv()

    try:
        config = load_configuration(args.config)
        settings = ActionSettings()

        if args.dry_run:
            outputs_dir = os.path.join(settings.runner_temp, f"{OUTPUTS_DIR_PREFIX}dry-run")
            print(shlex.join([settings.docker_bin, *generate_args(config, outputs_dir, settings)]))
            return 0

        result = KanikoRunner(settings=settings).run(config)
    except (KanikoActionError, ValidationError, FileNotFoundError, ValueError) as exc:
        logger.debug("Build failed", exc_info=True)
        set_failed(str(exc))
        return 1

    set_output("digest", result.image_digest)
    set_output("outputs-directory", result.outputs_directory)
    set_output("tar-path-without-prefix", result.export_archive_relative_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
