"""Configuration loading and validation."""

from sockrpc.config.loader import load_config
from sockrpc.config.schema import ClientConfig, Config, LoggingConfig, ServerConfig

__all__ = [
    "ClientConfig",
    "Config",
    "LoggingConfig",
    "ServerConfig",
    "load_config",
]
