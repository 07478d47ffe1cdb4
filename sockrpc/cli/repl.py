"""CLI entry point and the interactive client loop."""

from __future__ import annotations

import asyncio
import shlex
from pathlib import Path

from prompt_toolkit import PromptSession

from sockrpc.cli.arg_parser import build_parser, parse_args
from sockrpc.cli.client_commands import (
    cmd_call,
    cmd_methods,
    parse_cli_arg,
    resolve_client_settings,
)
from sockrpc.cli.output import console, print_error, print_response
from sockrpc.client import ClientError, SockRpcClient
from sockrpc.core.errors import SockRpcError
from sockrpc.rpc.registry import create_method_registry


def parse_repl_line(line: str) -> tuple[str, list[object]] | None:
    """Split `METHOD ARG ...` into the method name and its params.

    Arguments follow shell quoting rules and are then parsed like
    `sockrpc call` arguments. Returns None for blank lines.

    Raises:
        ValueError: On unbalanced quotes.
    """
    tokens = shlex.split(line)
    if not tokens:
        return None
    method, *args = tokens
    return method, [parse_cli_arg(arg) for arg in args]


async def run_repl(socket_path: str | None = None, config_path: Path | None = None) -> int:
    """Run an interactive session against a sockrpc server.

    Commands: /quit | /methods. Anything else is sent as a request.
    """
    try:
        effective_socket, timeout = resolve_client_settings(socket_path, config_path)
    except SockRpcError as e:
        print_error(f"Configuration error: {e.message}")
        return 1

    console.print("[bold]sockrpc client[/]")
    console.print(f"Server: {effective_socket}")
    console.print("Commands: /quit | /methods")
    console.print("")

    prompt_session: PromptSession[str] = PromptSession()

    async with SockRpcClient(effective_socket, timeout=timeout) as client:
        while True:
            try:
                user_input = await prompt_session.prompt_async("> ")
            except (EOFError, KeyboardInterrupt):
                console.print("")
                break

            stripped = user_input.strip()
            if stripped in ("/quit", "/q", "/exit"):
                console.print("Disconnecting.", style="dim")
                break
            if stripped == "/methods":
                console.print(", ".join(create_method_registry().names()))
                continue

            try:
                parsed = parse_repl_line(stripped)
            except ValueError as e:
                print_error(str(e))
                continue
            if parsed is None:
                continue

            method, params = parsed
            try:
                response = await client.call(method, params)
            except ClientError as e:
                print_error(e.message)
                continue
            print_response(response)

    return 0


def main(argv: list[str] | None = None) -> None:
    """Entry point for the sockrpc CLI."""
    args = parse_args(argv)

    try:
        if args.command == "serve":
            from sockrpc.cli.serve import run_serve

            exit_code = asyncio.run(run_serve(
                args.socket_path,
                args.config,
                args.keep_alive,
                args.log_dir,
                args.verbose,
            ))
        elif args.command == "call":
            exit_code = asyncio.run(cmd_call(
                args.method,
                args.args,
                args.socket_path,
                args.config,
                args.request_id,
                args.param_types,
                args.timeout,
                args.raw,
            ))
        elif args.command == "methods":
            exit_code = cmd_methods()
        elif args.command == "repl":
            exit_code = asyncio.run(run_repl(args.socket_path, args.config))
        else:
            build_parser().print_help()
            exit_code = 1
    except KeyboardInterrupt:
        exit_code = 0

    raise SystemExit(exit_code)
