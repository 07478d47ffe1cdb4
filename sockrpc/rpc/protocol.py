"""Line protocol parsing and serialization.

Every request and response is exactly one line of compact UTF-8 JSON
terminated by a single newline.
"""

import json
import math
from typing import Any

from sockrpc.core.errors import SockRpcError
from sockrpc.rpc.types import Request, Response


class ParseError(SockRpcError):
    """Raised when a request or response line cannot be decoded."""


# Error codes
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602

METHOD_NOT_FOUND_MESSAGE = "Method not found"
INVALID_PARAMS_MESSAGE = "Invalid params"

# Id used when the request id cannot be recovered from a bad line
UNKNOWN_ID = 0

MAX_REQUEST_ID = 2**64 - 1

# Deepest array/object nesting accepted in a request, counting the request itself
MAX_NESTING_DEPTH = 127

# Fields a request object may carry at most once
REQUEST_FIELDS = frozenset({"method", "params", "param_types", "id"})


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {text}")
    return value


def _parse_bounded_int(text: str) -> int:
    value = int(text)
    # Integers must still be representable as a double
    try:
        float(value)
    except OverflowError as e:
        raise ValueError(f"number out of range: {text}") from e
    return value


class _JsonObject(dict):
    """A decoded JSON object that remembers keys which appeared more than once."""

    duplicate_keys: frozenset[str] = frozenset()


def _build_object(pairs: list[tuple[str, Any]]) -> _JsonObject:
    obj = _JsonObject(pairs)
    if len(obj) != len(pairs):
        seen: set[str] = set()
        duplicates: set[str] = set()
        for key, _ in pairs:
            if key in seen:
                duplicates.add(key)
            seen.add(key)
        obj.duplicate_keys = frozenset(duplicates)
    return obj


def _loads(line: str) -> Any:
    """Decode JSON text the way the wire expects: no NaN/Infinity, no overflow."""
    try:
        return json.loads(
            line,
            object_pairs_hook=_build_object,
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
            parse_int=_parse_bounded_int,
        )
    except ValueError as e:
        # json.JSONDecodeError is a ValueError subclass
        raise ParseError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise ParseError("Invalid JSON: nesting too deep") from e


def _check_values(data: Any) -> None:
    """Reject over-deep nesting and strings holding unpaired surrogates.

    Walks iteratively so arbitrarily deep input cannot exhaust the stack.

    Raises:
        ParseError: On the first offending value.
    """
    stack: list[tuple[Any, int]] = [(data, 1)]
    while stack:
        value, depth = stack.pop()
        if isinstance(value, str):
            if any("\ud800" <= ch <= "\udfff" for ch in value):
                raise ParseError("Request contains an unpaired surrogate")
        elif isinstance(value, (list, dict)):
            if depth > MAX_NESTING_DEPTH:
                raise ParseError(f"Request nests deeper than {MAX_NESTING_DEPTH} levels")
            if isinstance(value, dict):
                stack.extend((key, depth) for key in value)
                stack.extend((item, depth + 1) for item in value.values())
            else:
                stack.extend((item, depth + 1) for item in value)


def _is_uint(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= MAX_REQUEST_ID
    )


def _dumps(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def parse_request(line: str) -> Request:
    """Parse one line of JSON text into a Request.

    Args:
        line: A single request line, with or without its line terminator.

    Returns:
        A parsed Request object.

    Raises:
        ParseError: If the JSON is invalid or the object has the wrong shape.
            The message describes the cause for logging; on the wire every
            ParseError looks the same.
    """
    data = _loads(line.strip())

    if not isinstance(data, dict):
        raise ParseError("Request must be a JSON object")

    duplicated = REQUEST_FIELDS & getattr(data, "duplicate_keys", frozenset())
    if duplicated:
        raise ParseError(f"Duplicate request fields: {sorted(duplicated)}")

    _check_values(data)

    method = data.get("method")
    if not isinstance(method, str):
        raise ParseError(f"method must be a string, got: {type(method).__name__}")

    if "params" not in data:
        raise ParseError("Request must have 'params' field")

    if "id" not in data:
        raise ParseError("Request must have 'id' field")
    request_id = data["id"]
    if not _is_uint(request_id):
        raise ParseError(f"id must be an unsigned integer, got: {request_id!r}")

    param_types = data.get("param_types")
    if param_types is not None and not (
        isinstance(param_types, list) and all(isinstance(t, str) for t in param_types)
    ):
        raise ParseError("param_types must be an array of strings")

    return Request(
        method=method,
        params=data["params"],
        id=request_id,
        param_types=param_types,
    )


def serialize_response(response: Response) -> str:
    """Serialize a Response to a JSON line.

    Args:
        response: The Response object to serialize.

    Returns:
        A single line of JSON text terminated by exactly one newline.
    """
    data: dict[str, Any]
    if response.error is not None:
        data = {"error": response.error, "id": response.id}
    else:
        data = {
            "result": response.result,
            "result_type": response.result_type,
            "id": response.id,
        }
    return _dumps(data) + "\n"


def make_error_response(request_id: int, code: int, message: str) -> Response:
    """Create an error response.

    Args:
        request_id: The id from the original request.
        code: Error code (METHOD_NOT_FOUND or INVALID_PARAMS).
        message: Human-readable error message.

    Returns:
        A Response with the error field populated.
    """
    return Response(id=request_id, error={"code": code, "message": message})


def make_success_response(request_id: int, result: str, result_type: str) -> Response:
    """Create a success response.

    Args:
        request_id: The id from the original request.
        result: The string rendering of the method's value.
        result_type: The type tag for result.

    Returns:
        A Response with the result fields populated.
    """
    return Response(id=request_id, result=result, result_type=result_type)


def make_decode_error_response() -> Response:
    """Response sent for any line that fails to decode into a Request."""
    return make_error_response(UNKNOWN_ID, INVALID_PARAMS, INVALID_PARAMS_MESSAGE)


# === Client-side functions ===


def serialize_request(request: Request) -> str:
    """Serialize a Request to a JSON line.

    Args:
        request: The Request object to serialize.

    Returns:
        A single line of JSON text terminated by exactly one newline.
    """
    data: dict[str, Any] = {
        "method": request.method,
        "params": request.params,
    }
    if request.param_types is not None:
        data["param_types"] = request.param_types
    data["id"] = request.id
    return _dumps(data) + "\n"


def parse_response(line: str) -> Response:
    """Parse one line of JSON text into a Response.

    Args:
        line: A single response line, with or without its line terminator.

    Returns:
        A parsed Response object.

    Raises:
        ParseError: If the JSON is invalid or fields are missing or mistyped.
    """
    data = _loads(line.strip())

    if not isinstance(data, dict):
        raise ParseError("Response must be a JSON object")

    response_id = data.get("id")
    if isinstance(response_id, bool) or not isinstance(response_id, int):
        raise ParseError(f"id must be an integer, got: {response_id!r}")

    has_result = "result" in data
    has_error = "error" in data

    if has_result and has_error:
        raise ParseError("Response cannot have both 'result' and 'error'")
    if not has_result and not has_error:
        raise ParseError("Response must have either 'result' or 'error'")

    if has_error:
        error = data["error"]
        if not isinstance(error, dict):
            raise ParseError(f"error must be an object, got: {type(error).__name__}")
        code = error.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            raise ParseError("error.code must be an integer")
        if not isinstance(error.get("message"), str):
            raise ParseError("error.message must be a string")
        return Response(id=response_id, error={"code": code, "message": error["message"]})

    result = data["result"]
    result_type = data.get("result_type")
    if not isinstance(result, str) or not isinstance(result_type, str):
        raise ParseError("result and result_type must be strings")
    return Response(id=response_id, result=result, result_type=result_type)
