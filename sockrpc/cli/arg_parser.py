"""Argument parsing for the sockrpc CLI."""

import argparse
from pathlib import Path


def add_socket_arg(parser: argparse.ArgumentParser) -> None:
    """Add --socket argument to a parser."""
    parser.add_argument(
        "--socket", "-s",
        dest="socket_path",
        metavar="PATH",
        help="Unix socket path (default: server.socket_path from config)",
    )


def add_config_arg(parser: argparse.ArgumentParser) -> None:
    """Add --config argument to a parser."""
    parser.add_argument(
        "--config", "-c",
        type=Path,
        metavar="PATH",
        help="Explicit config file (skips layered config lookup)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="sockrpc",
        description="Line-delimited JSON RPC over a Unix domain socket",
    )
    subparsers = parser.add_subparsers(dest="command")

    # serve - run the server
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the RPC server",
    )
    add_socket_arg(serve_parser)
    add_config_arg(serve_parser)
    serve_parser.add_argument(
        "--keep-alive",
        action="store_true",
        default=None,
        help="Answer multiple request lines per connection",
    )
    serve_parser.add_argument(
        "--log-dir",
        type=Path,
        metavar="DIR",
        help="Write server.log to this directory",
    )
    serve_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable DEBUG output on the console",
    )

    # call - single request
    call_parser = subparsers.add_parser(
        "call",
        help="Send one request to a running server",
    )
    call_parser.add_argument("method", help="Method name")
    call_parser.add_argument(
        "args",
        nargs="*",
        metavar="ARG",
        help="Positional argument, parsed as JSON or taken as a plain string",
    )
    call_parser.add_argument(
        "--id",
        dest="request_id",
        type=int,
        help="Request id (default: 1)",
    )
    call_parser.add_argument(
        "--param-types",
        nargs="+",
        metavar="TYPE",
        help="Type names sent as param_types",
    )
    call_parser.add_argument(
        "--timeout", "-t",
        type=float,
        help="Client timeout in seconds (default: client.timeout from config)",
    )
    call_parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the response line exactly as received",
    )
    add_socket_arg(call_parser)
    add_config_arg(call_parser)

    # methods - list registered methods
    subparsers.add_parser(
        "methods",
        help="List the methods the server provides",
    )

    # repl - interactive client
    repl_parser = subparsers.add_parser(
        "repl",
        help="Interactive client session",
    )
    add_socket_arg(repl_parser)
    add_config_arg(repl_parser)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)
