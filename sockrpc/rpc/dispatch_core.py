"""Dispatch outcomes and the shared request -> outcome -> response logic.

dispatch_request() resolves a request against a registry and reports one of
three outcomes. encode_outcome() maps an outcome onto the wire:

- Success      -> {"result", "result_type", "id"}
- MethodError  -> error -32602 with the method's message
- NotFound     -> error -32601 "Method not found"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sockrpc.rpc.methods import InvalidParamsError
from sockrpc.rpc.protocol import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    METHOD_NOT_FOUND_MESSAGE,
    make_error_response,
    make_success_response,
)
from sockrpc.rpc.registry import MethodRegistry
from sockrpc.rpc.types import Request, Response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    """The method computed a value."""

    result: str
    result_type: str


@dataclass(frozen=True)
class MethodError:
    """The method was found but rejected its params."""

    message: str


@dataclass(frozen=True)
class NotFound:
    """No method is registered under the requested name."""

    method: str


Outcome = Success | MethodError | NotFound


def dispatch_request(request: Request, registry: MethodRegistry) -> Outcome:
    """Look up and invoke the requested method.

    Args:
        request: The decoded request.
        registry: Method table to resolve request.method against.

    Returns:
        The outcome of the call. Unexpected exceptions from a method are not
        caught here; they propagate to the connection handler.
    """
    method = registry.lookup(request.method)
    if method is None:
        logger.debug("Method not found: %r (id=%s)", request.method, request.id)
        return NotFound(request.method)

    try:
        result, result_type = method(request.params)
    except InvalidParamsError as e:
        logger.debug("Invalid params for %s (id=%s): %r", request.method, request.id, request.params)
        return MethodError(e.message)

    return Success(result, result_type)


def encode_outcome(outcome: Outcome, request_id: int) -> Response:
    """Turn a dispatch outcome into the matching Response."""
    if isinstance(outcome, Success):
        return make_success_response(request_id, outcome.result, outcome.result_type)
    if isinstance(outcome, MethodError):
        return make_error_response(request_id, INVALID_PARAMS, outcome.message)
    return make_error_response(request_id, METHOD_NOT_FOUND, METHOD_NOT_FOUND_MESSAGE)
