"""Line-delimited JSON RPC over a Unix domain socket.

Example usage:
    python -m sockrpc serve            # Listen on /tmp/rpc.sock
    echo '{"method":"reverse","params":["abc"],"id":1}' | nc -U /tmp/rpc.sock
"""

from sockrpc.rpc.bootstrap import configure_server_logging
from sockrpc.rpc.dispatch_core import (
    MethodError,
    NotFound,
    Outcome,
    Success,
    dispatch_request,
    encode_outcome,
)
from sockrpc.rpc.dispatcher import Dispatcher
from sockrpc.rpc.methods import InvalidParamsError, format_double
from sockrpc.rpc.protocol import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    ParseError,
    make_decode_error_response,
    make_error_response,
    make_success_response,
    parse_request,
    parse_response,
    serialize_request,
    serialize_response,
)
from sockrpc.rpc.registry import Method, MethodRegistry, create_method_registry
from sockrpc.rpc.server import ServerError, handle_connection, run_server
from sockrpc.rpc.types import Request, Response

__all__ = [
    # Types
    "Request",
    "Response",
    # Protocol functions (server-side)
    "parse_request",
    "serialize_response",
    "make_error_response",
    "make_success_response",
    "make_decode_error_response",
    # Protocol functions (client-side)
    "serialize_request",
    "parse_response",
    # Error codes
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    # Registry and methods
    "Method",
    "MethodRegistry",
    "create_method_registry",
    "format_double",
    # Dispatch
    "Dispatcher",
    "Outcome",
    "Success",
    "MethodError",
    "NotFound",
    "dispatch_request",
    "encode_outcome",
    # Server
    "run_server",
    "handle_connection",
    "configure_server_logging",
    # Exceptions
    "ParseError",
    "InvalidParamsError",
    "ServerError",
]
