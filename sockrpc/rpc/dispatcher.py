"""Request dispatcher for the socket server."""

from __future__ import annotations

import logging

from sockrpc.rpc.dispatch_core import Outcome, dispatch_request, encode_outcome
from sockrpc.rpc.protocol import (
    ParseError,
    make_decode_error_response,
    parse_request,
    serialize_response,
)
from sockrpc.rpc.registry import MethodRegistry, create_method_registry
from sockrpc.rpc.types import Request, Response

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes decoded requests to registry methods.

    The dispatcher holds no per-request state, so a single instance is
    shared by every connection.
    """

    def __init__(self, registry: MethodRegistry | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Method table to dispatch against. Defaults to the
                built-in methods.
        """
        self._registry = registry if registry is not None else create_method_registry()

    @property
    def registry(self) -> MethodRegistry:
        return self._registry

    def dispatch(self, request: Request) -> Outcome:
        """Resolve and invoke the request's method."""
        return dispatch_request(request, self._registry)

    def handle(self, request: Request) -> Response:
        """Dispatch a request and build its response."""
        return encode_outcome(self.dispatch(request), request.id)

    def handle_line(self, line: str) -> str:
        """Run one full decode -> dispatch -> encode cycle.

        Args:
            line: One request line as received (terminator optional).

        Returns:
            The response line, newline-terminated. Lines that fail to decode
            get the generic invalid-params error with id 0.
        """
        try:
            request = parse_request(line)
        except ParseError as e:
            logger.info("Rejected request line: %s", e.message)
            return serialize_response(make_decode_error_response())

        return serialize_response(self.handle(request))
