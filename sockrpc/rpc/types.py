"""Wire types for the sockrpc line protocol."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Request:
    """A decoded RPC request.

    Attributes:
        method: Name of the method to invoke.
        params: Untyped JSON payload; each method extracts its own arguments.
        id: Request identifier, echoed back in the response.
        param_types: Optional type names for params. Carried, never used
            by dispatch.
    """

    method: str
    params: Any
    id: int
    param_types: list[str] | None = None


@dataclass
class Response:
    """An RPC response.

    Attributes:
        id: Request identifier from the original request (0 if unrecoverable).
        result: String rendering of the computed value (mutually exclusive with error).
        result_type: Tag telling the caller how to reinterpret result
            ("int", "double", "string" or "bool").
        error: Error object with "code" and "message" if the call failed.
    """

    id: int
    result: str | None = None
    result_type: str | None = None
    error: dict[str, Any] | None = None
