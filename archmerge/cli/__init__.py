"""CLI module."""

from archmerge.cli.main import app

__all__ = ["app"]
