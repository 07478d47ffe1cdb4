"""Typed exception hierarchy for sockrpc."""

from __future__ import annotations


class SockRpcError(Exception):
    """Base class for all sockrpc errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(SockRpcError):
    """Raised for configuration issues (invalid JSON, validation failure)."""


class LoadError(SockRpcError):
    """Raised when a JSON file cannot be found, read, or parsed."""
