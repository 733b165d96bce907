"""Command line entry point."""

from baby_affinity.cli.main import cli


__all__ = ["cli"]
