"""Core constants and paths for sockrpc.

Single source of truth for default locations. Modules import from here
instead of hardcoding paths like `Path.home() / ".sockrpc"`.
"""

from pathlib import Path

SOCKRPC_DIR_NAME = ".sockrpc"

DEFAULT_SOCKET_PATH = "/tmp/rpc.sock"

# Environment variable that overrides server.socket_path from config files
SOCKET_PATH_ENV = "SOCKRPC_SOCKET_PATH"


def get_sockrpc_dir() -> Path:
    """Get ~/.sockrpc (global config directory)."""
    return Path.home() / SOCKRPC_DIR_NAME


def get_default_config_path() -> Path:
    """Get global config file path."""
    return get_sockrpc_dir() / "config.json"


def get_local_config_path(cwd: Path) -> Path:
    """Get project-local config file path for a working directory."""
    return cwd / SOCKRPC_DIR_NAME / "config.json"


# Largest request or response line read from a socket, in bytes. A memory
# guard only; realistic requests are far below it.
DEFAULT_MAX_LINE_LENGTH = 16 * 1024 * 1024
