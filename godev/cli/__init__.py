"""CLI module for GoDev."""

from godev.cli.main import main

__all__ = ["main"]
