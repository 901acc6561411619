"""Command-line interface for TokenSniff."""

from tokensniff.cli.main import cli

__all__ = ["cli"]
