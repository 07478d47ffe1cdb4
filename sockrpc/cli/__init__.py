"""Command-line interface."""

from sockrpc.cli.repl import main

__all__ = ["main"]
