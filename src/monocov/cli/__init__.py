"""monocov command-line interface."""

from monocov.cli.main import cli

__all__ = ["cli"]
