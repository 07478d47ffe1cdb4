"""Server mode for sockrpc.

Loads configuration, sets up logging and runs the Unix socket server until
interrupted.

Example:
    sockrpc serve --socket /tmp/rpc.sock -v

    echo '{"method":"floor","params":[3.7],"id":1}' | nc -U /tmp/rpc.sock
    {"result":"3","result_type":"int","id":1}
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

from sockrpc.cli.output import print_error, print_info
from sockrpc.config.loader import load_config
from sockrpc.core.encoding import configure_stdio
from sockrpc.core.errors import SockRpcError
from sockrpc.rpc.bootstrap import configure_server_logging
from sockrpc.rpc.dispatcher import Dispatcher
from sockrpc.rpc.server import run_server

# Configure UTF-8 at module load
configure_stdio()

# Load .env file if present (may set SOCKRPC_SOCKET_PATH)
load_dotenv()


async def run_serve(
    socket_path: str | None = None,
    config_path: Path | None = None,
    keep_alive: bool | None = None,
    log_dir: Path | None = None,
    verbose: bool = False,
) -> int:
    """Run the RPC server with CLI overrides applied over config.

    Args:
        socket_path: Socket path. If None, uses config.server.socket_path.
        config_path: Explicit config file, or None for layered lookup.
        keep_alive: Override config.server.keep_alive when not None.
        log_dir: Override config.logging.log_dir when not None.
        verbose: Enable DEBUG output to console.

    Returns:
        Exit code: 0 on clean shutdown, 1 on configuration or bind errors.
    """
    try:
        config = load_config(config_path)
    except SockRpcError as e:
        print_error(f"Configuration error: {e.message}")
        return 1

    effective_socket = socket_path or config.server.socket_path
    effective_keep_alive = config.server.keep_alive if keep_alive is None else keep_alive
    effective_log_dir = log_dir
    if effective_log_dir is None and config.logging.log_dir is not None:
        effective_log_dir = Path(config.logging.log_dir)

    console_level = logging.DEBUG if verbose else getattr(logging, config.logging.console_level)
    configure_server_logging(
        effective_log_dir,
        level=getattr(logging, config.logging.level),
        console_level=console_level,
    )

    dispatcher = Dispatcher()
    print_info(f"Methods: {', '.join(dispatcher.registry.names())}")

    try:
        await run_server(
            effective_socket,
            dispatcher,
            keep_alive=effective_keep_alive,
            max_line_length=config.server.max_line_length,
        )
    except SockRpcError as e:
        print_error(e.message)
        return 1
    except OSError as e:
        print_error(f"Cannot listen on {effective_socket}: {e}")
        return 1
    return 0
