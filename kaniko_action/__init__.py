"""Build container images with Kaniko from a CI pipeline."""

__version__ = "0.1.0"
