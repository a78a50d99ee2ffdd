"""Command-line interface for bibcheck."""

from bibcheck.cli.main import cli, main

__all__ = ["cli", "main"]
