"""CLI commands that talk to a running sockrpc server.

Each function prints its output and returns an exit code:
    sockrpc call floor 3.7
    sockrpc call sort '["b","a"]'
    sockrpc call reverse hello --raw
"""

import json
from pathlib import Path
from typing import Any

from sockrpc.cli.output import console, print_error, print_response
from sockrpc.client import ClientError, SockRpcClient
from sockrpc.config.loader import load_config
from sockrpc.core.errors import SockRpcError
from sockrpc.rpc.protocol import serialize_request
from sockrpc.rpc.registry import create_method_registry
from sockrpc.rpc.types import Request


def _reject_non_finite(text: str) -> Any:
    raise ValueError(f"{text} is not valid JSON")


def parse_cli_arg(text: str) -> Any:
    """Interpret a command-line argument as JSON, falling back to a plain string.

    `3.7` becomes a number, `'["a","b"]'` an array, and `hello` stays a string.
    `NaN` and `Infinity` also stay strings, since the wire has no such numbers.
    """
    try:
        return json.loads(text, parse_constant=_reject_non_finite)
    except ValueError:
        return text


def resolve_client_settings(
    socket_path: str | None,
    config_path: Path | None,
    timeout: float | None = None,
) -> tuple[str, float]:
    """Merge CLI flags over config to get (socket_path, timeout).

    Raises:
        SockRpcError: If the config cannot be loaded.
    """
    config = load_config(config_path)
    return (
        socket_path or config.server.socket_path,
        timeout if timeout is not None else config.client.timeout,
    )


async def cmd_call(
    method: str,
    args: list[str],
    socket_path: str | None = None,
    config_path: Path | None = None,
    request_id: int | None = None,
    param_types: list[str] | None = None,
    timeout: float | None = None,
    raw: bool = False,
) -> int:
    """Send one request and print the response.

    Returns:
        Exit code: 0 on a success response, 1 on an error response or
        client failure. With raw, any response line counts as success.
    """
    try:
        effective_socket, effective_timeout = resolve_client_settings(
            socket_path, config_path, timeout
        )
    except SockRpcError as e:
        print_error(f"Configuration error: {e.message}")
        return 1

    params = [parse_cli_arg(arg) for arg in args]
    client = SockRpcClient(effective_socket, timeout=effective_timeout)
    try:
        if raw:
            request = Request(
                method=method,
                params=params,
                id=request_id if request_id is not None else 1,
                param_types=param_types,
            )
            line = await client.send_line(serialize_request(request))
            console.out(line, end="")
            return 0
        response = await client.call(method, params, param_types, request_id)
    except ClientError as e:
        print_error(e.message)
        return 1
    except ValueError as e:
        print_error(f"Cannot encode request: {e}")
        return 1

    print_response(response)
    return 1 if response.error is not None else 0


def cmd_methods() -> int:
    """Print the built-in method names, one per line."""
    for name in create_method_registry().names():
        console.print(name)
    return 0
