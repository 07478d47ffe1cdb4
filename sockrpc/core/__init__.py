"""Core errors, constants and helpers."""

from sockrpc.core.constants import DEFAULT_SOCKET_PATH, SOCKET_PATH_ENV, get_sockrpc_dir
from sockrpc.core.errors import ConfigError, LoadError, SockRpcError

__all__ = [
    "DEFAULT_SOCKET_PATH",
    "SOCKET_PATH_ENV",
    "get_sockrpc_dir",
    "SockRpcError",
    "ConfigError",
    "LoadError",
]
